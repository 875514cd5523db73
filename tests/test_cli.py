import wave

import pytest

from diodedrive.cli import main, process_wav


def _write_wav(path, channels, width, rate, frames):
    with wave.open(str(path), "wb") as sink:
        sink.setnchannels(len(channels) if channels else 1)
        sink.setsampwidth(width)
        sink.setframerate(rate)
        sink.writeframes(frames)


def _write_pcm16(path, channels, rate=44100):
    data = b"".join(
        value.to_bytes(2, "little", signed=True)
        for frame in zip(*channels)
        for value in frame
    )
    with wave.open(str(path), "wb") as sink:
        sink.setnchannels(len(channels))
        sink.setsampwidth(2)
        sink.setframerate(rate)
        sink.writeframes(data)


def _read_pcm16(path):
    with wave.open(str(path), "rb") as source:
        count = source.getnchannels()
        data = source.readframes(source.getnframes())
        params = (count, source.getsampwidth(), source.getframerate())
    values = [
        int.from_bytes(data[i:i + 2], "little", signed=True)
        for i in range(0, len(data), 2)
    ]
    return params, [values[c::count] for c in range(count)]


def test_bypass_preserves_dc(tmp_path):
    source = tmp_path / "in.wav"
    target = tmp_path / "out.wav"
    _write_pcm16(source, [[8000] * 2000])
    frames = process_wav(source, target, enabled=False)
    params, channels = _read_pcm16(target)
    assert frames == 2000
    assert params == (1, 2, 44100)
    assert abs(channels[0][-1] - 8000) <= 2


def test_stereo_format_preserved(tmp_path):
    source = tmp_path / "in.wav"
    target = tmp_path / "out.wav"
    left = [(n * 37) % 4000 - 2000 for n in range(1500)]
    right = [-x for x in left]
    _write_pcm16(source, [left, right], rate=48000)
    assert process_wav(source, target, 0.6, 0.9, True) == 1500
    params, channels = _read_pcm16(target)
    assert params == (2, 2, 48000)
    assert [len(c) for c in channels] == [1500, 1500]


def test_silence_stays_silent_8bit(tmp_path):
    source = tmp_path / "in.wav"
    target = tmp_path / "out.wav"
    _write_wav(source, [0], 1, 22050, bytes([128]) * 300)
    process_wav(source, target)
    with wave.open(str(target), "rb") as result:
        data = result.readframes(result.getnframes())
        width = result.getsampwidth()
    assert width == 1
    assert data == bytes([128]) * 300


def test_three_channels_rejected(tmp_path):
    source = tmp_path / "in.wav"
    _write_pcm16(source, [[0] * 10, [0] * 10, [0] * 10])
    with pytest.raises(ValueError):
        process_wav(source, tmp_path / "out.wav")


def test_low_sample_rate_rejected(tmp_path):
    source = tmp_path / "in.wav"
    _write_pcm16(source, [[0] * 10], rate=8000)
    with pytest.raises(ValueError):
        process_wav(source, tmp_path / "out.wav")


def test_main_success(tmp_path, capsys):
    source = tmp_path / "in.wav"
    target = tmp_path / "out.wav"
    _write_pcm16(source, [[100] * 50])
    status = main([str(source), str(target), "--distortion", "0.3", "--level", "0.5"])
    assert status == 0
    assert target.exists()
    assert "50 frames" in capsys.readouterr().out


def test_main_missing_input(tmp_path, capsys):
    status = main([str(tmp_path / "missing.wav"), str(tmp_path / "out.wav")])
    assert status == 1
    assert "diodedrive:" in capsys.readouterr().err


def test_main_bad_layout(tmp_path):
    source = tmp_path / "in.wav"
    _write_pcm16(source, [[0] * 5, [0] * 5, [0] * 5])
    assert main([str(source), str(tmp_path / "out.wav"), "--bypass"]) == 1