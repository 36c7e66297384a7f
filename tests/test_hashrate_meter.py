from powlab.hashrate_meter import HashrateMeter


def test_window_stays_open_before_a_second(clock):
    meter = HashrateMeter(clock=clock)
    meter.measure()
    clock.advance(0.999)
    assert meter.sample() is None
    assert meter.attempts_in_current_window == 1
    assert meter.get_speed() == 0


def test_window_closes_after_a_second(clock):
    meter = HashrateMeter(clock=clock)
    for _ in range(42):
        meter.measure()
    clock.advance(1.0)
    assert meter.sample() == 42
    assert meter.attempts_in_current_window == 0
    assert meter.get_speed() == 42

    meter.measure(3)
    clock.advance(0.5)
    assert meter.sample() is None
    clock.advance(0.6)
    assert meter.sample() == 3
    assert meter.get_speed() == 3


def test_average_speed(clock):
    meter = HashrateMeter(history_size=3, clock=clock)
    assert meter.get_average_speed() is None
    for rate in (10, 20, 30, 40):
        meter.measure(rate)
        clock.advance(1)
        meter.sample()
    # only the last three windows are kept
    assert meter.get_average_speed() == 30.0


def test_reset(clock):
    meter = HashrateMeter(clock=clock)
    meter.measure(5)
    clock.advance(2)
    meter.sample()
    meter.measure(2)
    meter.reset()
    assert meter.attempts_in_current_window == 0
    assert meter.get_speed() == 0
    assert meter.get_average_speed() is None
    assert meter.last_sample_at == 2000.0
