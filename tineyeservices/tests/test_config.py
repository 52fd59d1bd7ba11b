import pytest

from tineyeservices import ClientConfig, MatchEngineRequest


def test_from_env_reads_tineye_variables():
    cfg = ClientConfig.from_env(
        {
            "TINEYE_API_URL": " https://acme.tineye.com/rest/ ",
            "TINEYE_API_USERNAME": "alice",
            "TINEYE_API_PASSWORD": "s3cret",
            "TINEYE_TIMEOUT_SEC": "15",
            "TINEYE_MAX_UPLOAD_BYTES": "1024",
        }
    )
    assert cfg.api_url == "https://acme.tineye.com/rest/"
    assert (cfg.username, cfg.password) == ("alice", "s3cret")
    assert cfg.timeout_sec == 15.0
    assert cfg.max_upload_bytes == 1024


def test_from_env_defaults():
    cfg = ClientConfig.from_env({})
    assert cfg.api_url == ""
    assert cfg.username is None and cfg.password is None
    assert cfg.timeout_sec is None
    assert cfg.max_upload_bytes is None


def test_fractional_timeout_is_kept():
    cfg = ClientConfig.from_env({"TINEYE_API_URL": "http://x/rest", "TINEYE_TIMEOUT_SEC": "2.5"})
    assert cfg.timeout_sec == 2.5


@pytest.mark.parametrize("raw", ["soon", "0", "-1", "nan", "inf", ""])
def test_unusable_timeouts_are_unset(raw):
    assert ClientConfig.from_env({"TINEYE_TIMEOUT_SEC": raw}).timeout_sec is None


@pytest.mark.parametrize("raw", ["lots", "0", "-5"])
def test_unusable_upload_caps_are_unset(raw):
    assert ClientConfig.from_env({"TINEYE_MAX_UPLOAD_BYTES": raw}).max_upload_bytes is None


def test_default_config_does_not_cap_post_bodies():
    e = MatchEngineRequest.from_config(ClientConfig(api_url="http://x/rest"))
    assert e.request.max_upload_bytes is None


def test_repr_masks_password():
    cfg = ClientConfig(api_url="http://x/rest/", username="alice", password="s3cret")
    assert "s3cret" not in repr(cfg)
    assert "***" in repr(cfg)
    assert "password=None" in repr(ClientConfig(api_url="http://x/rest/"))
