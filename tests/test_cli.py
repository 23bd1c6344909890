import pytest

from cli.main import build_parser, main
from runtime.models.log_models import Event, EventType, StreamSelector
from runtime.store.log_store import LogStore


def _seed(store: LogStore) -> None:
    store.append(
        Event(
            timestamp="2025-01-01T00:00:00.000Z",
            type=EventType.ERROR,
            title="Crash",
            description="npe",
            metadata={"screen": "Home"},
        )
    )
    store.append(
        Event(timestamp="2025-01-01T00:00:01.000Z", type=EventType.INFO, title="Opened")
    )


def test_tail_prints_newest_first(store: LogStore, logs_dir, capsys) -> None:
    _seed(store)
    main(["--logs-dir", str(logs_dir), "tail", "--limit", "5"])
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "[2025-01-01T00:00:01.000Z] [INFO] Opened",
        "[2025-01-01T00:00:00.000Z] [ERROR] Crash - npe",
    ]


def test_tail_typed_stream_includes_metadata(store: LogStore, logs_dir, capsys) -> None:
    _seed(store)
    main(["--logs-dir", str(logs_dir), "tail", "--type", "error"])
    out = capsys.readouterr().out
    assert "[ERROR] Crash - npe" in out
    assert '{"screen": "Home"}' in out


def test_tail_empty_stream(logs_dir, capsys) -> None:
    main(["--logs-dir", str(logs_dir), "tail", "--type", "api-failed"])
    assert "No logs found in api-failed stream" in capsys.readouterr().out


def test_clear_single_type(store: LogStore, logs_dir, capsys) -> None:
    _seed(store)
    main(["--logs-dir", str(logs_dir), "clear", "--type", "log"])
    assert "info logs cleared" in capsys.readouterr().out
    assert store.read(StreamSelector.INFO, 10) == []
    assert len(store.read(StreamSelector.ERROR, 10)) == 1


def test_clear_all(store: LogStore, logs_dir) -> None:
    _seed(store)
    main(["--logs-dir", str(logs_dir), "clear"])
    for selector in StreamSelector:
        assert store.read(selector, 10) == []


def test_unknown_type_is_a_usage_error(logs_dir) -> None:
    with pytest.raises(SystemExit):
        main(["--logs-dir", str(logs_dir), "tail", "--type", "warning"])


def test_tail_rejects_zero_limit() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["tail", "--limit", "0"])
