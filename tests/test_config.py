from quotes import config


def test_int_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("QUOTES_RETRY_ATTEMPTS", "three")
    assert config._number("QUOTES_RETRY_ATTEMPTS", 3, int) == 3

    monkeypatch.setenv("QUOTES_RETRY_ATTEMPTS", "5")
    assert config._number("QUOTES_RETRY_ATTEMPTS", 3, int) == 5


def test_float_falls_back_on_garbage(monkeypatch, caplog):
    monkeypatch.setenv("QUOTES_READ_TIMEOUT", "ten")
    assert config._number("QUOTES_READ_TIMEOUT", 10.0, float) == 10.0
    assert "config.invalid_number name=QUOTES_READ_TIMEOUT" in caplog.text

    monkeypatch.setenv("QUOTES_READ_TIMEOUT", " 2.5 ")
    assert config._number("QUOTES_READ_TIMEOUT", 10.0, float) == 2.5


def test_number_default_when_unset(monkeypatch):
    monkeypatch.delenv("QUOTES_CONNECT_TIMEOUT", raising=False)
    assert config._number("QUOTES_CONNECT_TIMEOUT", 5.0, float) == 5.0


def test_choice_normalizes_and_validates(monkeypatch, caplog):
    monkeypatch.setenv("QUOTES_BATCH_POLICY", " Best_Effort ")
    assert (
        config._choice("QUOTES_BATCH_POLICY", "fail_fast", config.BATCH_POLICIES)
        == "best_effort"
    )

    monkeypatch.setenv("QUOTES_BATCH_POLICY", "partial")
    assert (
        config._choice("QUOTES_BATCH_POLICY", "fail_fast", config.BATCH_POLICIES)
        == "fail_fast"
    )
    assert "config.invalid_choice name=QUOTES_BATCH_POLICY" in caplog.text


def test_choice_default_when_unset(monkeypatch):
    monkeypatch.delenv("QUOTES_ERROR_MODE", raising=False)
    assert config._choice("QUOTES_ERROR_MODE", "flat", config.ERROR_MODES) == "flat"
