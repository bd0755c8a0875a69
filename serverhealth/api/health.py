from fastapi import APIRouter, Response

from serverhealth.services import snapshot

router = APIRouter()


@router.get("", summary="Host health snapshot")
def health_snapshot() -> Response:
    """
    Return a fresh snapshot of all host metrics.

    Declared as a plain function so FastAPI runs it in its thread pool: the
    CPU measurement sleeps for 200 ms and must not block the event loop.
    """
    document = snapshot.render_health_json(snapshot.collect_health_snapshot())
    return Response(content=document, media_type="application/json")
