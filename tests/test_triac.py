import math

import pytest

from roastkit.triac import ICC_PIN, PHASE_DELAY, RATIO_M, ZC_LEAD, Channel, TriacDimmer


@pytest.fixture
def writes():
    return []


@pytest.fixture
def dimmer(writes):
    d = TriacDimmer(lambda pin, level: writes.append((pin, level)))
    d.begin()
    return d


@pytest.mark.parametrize("duty, delay", [(2, 17061), (50, 10000), (99, 2320)])
def test_phase_delay_table_values(dimmer, duty, delay):
    dimmer.set_duty(9, duty)
    rise, _ = dimmer.zero_crossing(20000)[Channel.A]
    assert rise - 20000 == delay + ZC_LEAD


def test_set_duty_schedules_pulse_from_table(dimmer):
    dimmer.set_duty(9, 50)
    pulses = dimmer.zero_crossing(20000)
    rise, fall = pulses[Channel.A]
    assert rise == 20000 + PHASE_DELAY[50] + ZC_LEAD
    assert fall - rise == dimmer.pulse_length
    assert Channel.B not in pulses
    assert 9 in dimmer.outputs


def test_set_duty_above_on_threshold_drives_high(writes):
    d = TriacDimmer(lambda pin, level: writes.append((pin, level)))
    d.begin(on_thresh=0.5)
    d.set_duty(10, 80)
    assert (10, True) in writes
    assert Channel.B not in d.zero_crossing(20000)


def test_set_duty_below_off_threshold_drives_low(dimmer, writes):
    dimmer.set_duty(9, 50)
    dimmer.set_duty(9, 0)
    assert (9, False) in writes
    assert Channel.A not in dimmer.zero_crossing(20000)


def test_invalid_pin_rejected(dimmer):
    with pytest.raises(ValueError):
        dimmer.set_duty(8, 50)
    with pytest.raises(ValueError):
        dimmer.set_brightness(11, 0.5)
    with pytest.raises(ValueError):
        dimmer.disable(3)


def test_set_brightness_half_fires_mid_period(dimmer):
    dimmer.set_brightness(10, 0.5)
    rise, fall = dimmer.zero_crossing(20000)[Channel.B]
    assert rise - 20000 == dimmer.period // 2
    assert fall - rise == dimmer.pulse_length


def test_pulse_end_clamped_to_min_trigger(dimmer):
    dimmer.begin(pulse_length=20, min_trigger=2000)
    dimmer.set_channel_direct(Channel.A, 0)
    dimmer.set_brightness(9, 0.5)  # enables A
    dimmer.set_channel_direct(Channel.A, 0)
    rise, fall = dimmer.zero_crossing(20000)[Channel.A]
    assert rise == 20000
    assert fall - 20000 == 2000


def test_pulse_end_clamped_to_period(dimmer):
    dimmer.set_brightness(9, 0.5)
    dimmer.set_channel_direct(Channel.A, dimmer.period - 10)
    rise, fall = dimmer.zero_crossing(0)[Channel.A]
    assert fall == 20000


def test_period_measured_with_wraparound(dimmer):
    dimmer.zero_crossing(60000)
    dimmer.zero_crossing((60000 + 19000) & 0xFFFF)
    assert dimmer.period == 19000


def test_brightness_consistent_with_phase(dimmer):
    dimmer.set_channel_direct(Channel.B, 8000)
    assert dimmer.brightness(10) == pytest.approx(1 - dimmer.channel_phase(Channel.B))
    assert dimmer.channel_phase(Channel.B) > 1


def test_channel_phase_zero_delay_is_infinite(dimmer):
    dimmer.set_channel_direct(Channel.A, 0)
    assert dimmer.channel_phase(Channel.A) == math.inf


def test_disable_stops_pulses(dimmer):
    dimmer.set_duty(9, 40)
    dimmer.set_duty(10, 40)
    dimmer.disable(9)
    pulses = dimmer.zero_crossing(20000)
    assert set(pulses) == {Channel.B}


@pytest.mark.parametrize("duty, expected_high", [(50, 50), (0, 0), (150, RATIO_M)])
def test_icc_sequence_duty(dimmer, writes, duty, expected_high):
    dimmer.set_icc(duty)
    for n in range(RATIO_M):
        dimmer.zero_crossing(n * 20000)
    icc = [level for pin, level in writes if pin == ICC_PIN]
    assert len(icc) == RATIO_M
    assert sum(icc) == expected_high
    assert ICC_PIN in dimmer.outputs


def test_zero_crossing_requires_begin(writes):
    d = TriacDimmer(lambda pin, level: writes.append((pin, level)))
    with pytest.raises(RuntimeError):
        d.zero_crossing(100)
    d.begin()
    d.end()
    with pytest.raises(RuntimeError):
        d.zero_crossing(100)
    assert writes == []