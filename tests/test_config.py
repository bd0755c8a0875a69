from serverhealth.config import Settings, get_settings


def test_settings_defaults(monkeypatch):
    for name in ("PROC_PATH", "SYS_PATH", "WEB_ROOT", "PORT", "SPEEDTEST_ENABLED"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.proc_path == "/proc"
    assert settings.sys_path == "/sys"
    assert settings.web_root == "/usr/share/serverhealth"
    assert settings.port == 9090
    assert settings.speedtest_enabled is True
    assert settings.speedtest_interval_seconds == 3600


def test_settings_from_env_overrides_paths(monkeypatch):
    monkeypatch.setenv("PROC_PATH", "/host/proc")
    monkeypatch.setenv("SYS_PATH", "/host/sys")
    monkeypatch.setenv("PORT", "9091")

    settings = Settings.from_env()
    assert settings.proc_path == "/host/proc"
    assert settings.sys_path == "/host/sys"
    assert settings.port == 9091


def test_invalid_port_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")
    assert Settings.from_env().port == 9090


def test_speedtest_can_be_disabled(monkeypatch):
    monkeypatch.setenv("SPEEDTEST_ENABLED", "false")
    assert Settings.from_env().speedtest_enabled is False


def test_get_settings_is_cached(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("WEB_ROOT", "/srv/dashboard")
    s1 = get_settings()
    s2 = get_settings()
    assert s1 is s2
    assert s1.web_root == "/srv/dashboard"
    get_settings.cache_clear()


def test_out_of_range_integers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("PORT", "70000")
    monkeypatch.setenv("SPEEDTEST_INTERVAL_SECONDS", "0")

    settings = Settings.from_env()
    assert settings.port == 9090
    assert settings.speedtest_interval_seconds == 3600

    monkeypatch.setenv("PORT", "0")
    assert Settings.from_env().port == 9090


def test_bad_integer_setting_does_not_break_extractors(monkeypatch, tmp_path):
    """
    An unusable integer in the environment must not turn every pseudo-file
    read into an error.
    """
    from serverhealth.services import memory_monitor

    (tmp_path / "meminfo").write_text("MemTotal: 1000 kB\nMemFree: 250 kB\n")
    monkeypatch.setenv("PROC_PATH", str(tmp_path))
    monkeypatch.setenv("SPEEDTEST_INTERVAL_SECONDS", "0")
    get_settings.cache_clear()
    try:
        reading = memory_monitor.get_memory_reading()
    finally:
        get_settings.cache_clear()

    assert reading.total_kb == 1000
    assert reading.used_kb == 750
