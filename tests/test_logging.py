from __future__ import annotations

import io
import json
import logging

from chaincfg.observability.logging import configure_logging


def test_json_lines_with_extra_fields() -> None:
    buf = io.StringIO()
    configure_logging(level="debug", stream=buf)

    logging.getLogger("chaincfg.test").info(
        "config_loaded",
        extra={"config_files": ["configs/project.yaml"], "obj": object()},
    )

    payload = json.loads(buf.getvalue().strip())
    assert payload["level"] == "INFO"
    assert payload["logger"] == "chaincfg.test"
    assert payload["message"] == "config_loaded"
    assert payload["config_files"] == ["configs/project.yaml"]
    assert payload["obj"].startswith("<object object")
    assert "ts" in payload


def test_configure_twice_does_not_duplicate() -> None:
    buf = io.StringIO()
    configure_logging(stream=buf)
    configure_logging(stream=buf)

    logging.getLogger("chaincfg.test").warning("once")

    assert len(buf.getvalue().strip().splitlines()) == 1


def test_exception_info_is_rendered() -> None:
    buf = io.StringIO()
    configure_logging(stream=buf)

    try:
        raise ValueError("boom")
    except ValueError:
        logging.getLogger("chaincfg.test").exception("fatal_error")

    payload = json.loads(buf.getvalue().strip())
    assert "ValueError: boom" in payload["exc_info"]


def test_circular_extra_falls_back_to_repr() -> None:
    buf = io.StringIO()
    configure_logging(stream=buf)
    loop: list[object] = []
    loop.append(loop)

    logging.getLogger("chaincfg.test").warning("loop", extra={"loop": loop})

    payload = json.loads(buf.getvalue().strip())
    assert payload["loop"] == "[[...]]"
