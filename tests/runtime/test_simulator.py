import pytest
from pyv_csim.config import CsimConfig
from pyv_csim.errors import ConfigurationError, TraceSourceError
from pyv_csim.runtime.cache import CacheModel, Outcome
from pyv_csim.runtime.simulator import replay, replay_record, run
from pyv_csim.trace.parser import AccessKind, TraceRecord, parse_trace


def test_modify_record_accesses_twice():
    model = CacheModel(set_bits=4, associativity=1, block_bits=4)
    outcomes = replay_record(model, TraceRecord(AccessKind.MODIFY, 0x10, 1))
    assert outcomes == [Outcome.MISS_COLD, Outcome.HIT]
    assert model.stats() == {"hits": 1, "misses": 1, "evictions": 0}


def test_instruction_records_are_ignored():
    model = CacheModel(set_bits=4, associativity=1, block_bits=4)
    replay(parse_trace(["I  0400d7d4,8", "I  0400d7d8,4"]), model)
    assert model.accesses == 0


def test_replay_end_to_end_small_geometry():
    # s=1, E=1, b=1: address 2 decodes to set 1, so it cannot evict block 0
    model = CacheModel(set_bits=1, associativity=1, block_bits=1)
    replay(parse_trace([" L 0,1", " L 0,1", " L 2,1"]), model)
    assert model.stats() == {"hits": 1, "misses": 2, "evictions": 0}


def test_replay_echo_reports_outcomes():
    model = CacheModel(set_bits=4, associativity=1, block_bits=4)
    lines = []
    trace = [" L 10,1", "I  0400d7d4,8", " M 20,1", " L 110,1"]
    replay(parse_trace(trace), model, echo=lines.append)
    assert lines == [
        "L 10,1 miss",
        "M 20,1 miss hit",
        "L 110,1 miss eviction",
    ]


@pytest.mark.parametrize("trace, s, E, b, expected", [
    ("yi.trace", 4, 1, 4, (4, 5, 3)),
    ("yi.trace", 4, 2, 4, (4, 5, 2)),
    ("yi.trace", 1, 1, 1, (2, 7, 5)),
    ("dave.trace", 2, 1, 4, (2, 3, 1)),
])
def test_run_reference_traces(traces_dir, trace, s, E, b, expected):
    config = CsimConfig(s=s, E=E, b=b, trace=str(traces_dir / trace))
    model = run(config)
    assert (model.hits, model.misses, model.evictions) == expected


def test_run_counts_every_data_access(traces_dir):
    # 2 M + 3 L + 2 S records, instruction fetches excluded
    config = CsimConfig(s=2, E=1, b=2, trace=str(traces_dir / "trans.trace"))
    model = run(config)
    assert model.hits + model.misses == 9
    assert model.evictions <= model.misses


def test_run_verbose_prints_records(traces_dir, capsys):
    config = CsimConfig(s=4, E=1, b=4, trace=str(traces_dir / "yi.trace"), verbose=True)
    run(config)
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "L 10,1 miss",
        "M 20,1 miss hit",
        "L 22,1 hit",
        "S 18,1 hit",
        "L 110,1 miss eviction",
        "L 210,1 miss eviction",
        "M 12,1 miss eviction hit",
    ]


def test_run_skips_malformed_records(write_trace):
    path = write_trace([" L 10,1", " L nothex,1", " L 10,1"])
    model = run(CsimConfig(s=1, E=1, b=1, trace=str(path)))
    assert model.stats() == {"hits": 1, "misses": 1, "evictions": 0}


def test_run_rejects_bad_config_before_reading(tmp_path):
    config = CsimConfig(s=0, E=1, b=4, trace=str(tmp_path / "missing.trace"))
    with pytest.raises(ConfigurationError):
        run(config)


def test_run_missing_trace(tmp_path):
    config = CsimConfig(s=1, E=1, b=1, trace=str(tmp_path / "missing.trace"))
    with pytest.raises(TraceSourceError):
        run(config)
