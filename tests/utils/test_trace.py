from types import SimpleNamespace

from pychip8.utils.trace import TraceRecorder


def _cpu(pc: int, v0: int = 0, **kwargs):
    registers = [0] * 16
    registers[0] = v0
    defaults = dict(pc=pc, registers=tuple(registers), index=0, stack_depth=0, delay_timer=0, sound_timer=0)
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_cpu(0x200, v0=0x11), 0x6011, mnemonic="LD")
    recorder.record_step(_cpu(0x202, index=0x300), 0xA300, mnemonic="LD")
    recorder.record_step(_cpu(0x204, stack_depth=1), 0x2400, mnemonic="CALL", note="call")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=202" in lines[0]
    assert "I=300" in lines[0]
    assert "pc=204" in lines[1]
    assert "SP=01" in lines[1]
    assert "note=call" in lines[1]


def test_trace_recorder_pc_override_and_empty_word():
    recorder = TraceRecorder(1)
    recorder.record_step(_cpu(0x20A), None, pc=0x208, note="fault")

    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "pc=208" in lines[0]
    assert "word=----" in lines[0]
    assert recorder.last_entry().note == "fault"


def test_trace_recorder_limit_and_clear():
    recorder = TraceRecorder(8)
    for offset in range(5):
        recorder.record_step(_cpu(0x200 + 2 * offset), 0x00E0, mnemonic="CLS")

    assert [entry.pc for entry in recorder.entries(limit=2)] == [0x206, 0x208]

    recorder.clear()
    assert recorder.last_entry() is None
    assert list(recorder.format_entries()) == []
