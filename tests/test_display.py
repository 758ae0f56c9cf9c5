import pytest

from astrolib.display import FrameBuffer, TextRun


@pytest.fixture
def fb():
    return FrameBuffer(128, 64)


def test_draw_pixel_lights_it(fb):
    fb.draw_pixel(5, 7)
    assert fb.pixel(5, 7)
    assert not fb.pixel(7, 5)
    assert fb.lit_pixel_count == 1


def test_off_screen_pixels_are_ignored(fb):
    fb.draw_pixel(-1, 0)
    fb.draw_pixel(128, 10)
    fb.draw_pixel(3, 64)
    assert fb.lit_pixel_count == 0
    assert fb.pixel(-1, 0) is False


def test_horizontal_line_covers_endpoints(fb):
    fb.draw_line(2, 3, 10, 3)
    assert all(fb.pixel(x, 3) for x in range(2, 11))
    assert fb.lit_pixel_count == 9


def test_line_direction_does_not_matter():
    a = FrameBuffer(32, 32)
    b = FrameBuffer(32, 32)
    a.draw_line(1, 2, 20, 9)
    b.draw_line(20, 9, 1, 2)
    a.show()
    b.show()
    assert a.frame == b.frame


def test_steep_line_has_one_pixel_per_row(fb):
    fb.draw_line(4, 0, 7, 20)
    for y in range(21):
        assert sum(fb.pixel(x, y) for x in range(128)) == 1


def test_triangle_touches_vertices(fb):
    fb.draw_triangle(10, 10, 30, 12, 20, 40)
    assert fb.pixel(10, 10) and fb.pixel(30, 12) and fb.pixel(20, 40)


def test_clear_removes_pixels_and_text(fb):
    fb.draw_line(0, 0, 50, 50)
    fb.print("hello")
    fb.clear()
    assert fb.lit_pixel_count == 0
    assert fb.texts == []


def test_print_records_run_and_advances_cursor(fb):
    fb.set_cursor(15, 10)
    fb.print("ASTEROIDS")
    width, _ = fb.text_bounds("ASTEROIDS")
    assert fb.texts == [TextRun(15, 10, 1, "ASTEROIDS")]
    assert fb.cursor == (15 + width, 10)


def test_print_accepts_numbers(fb):
    fb.print(120)
    assert fb.texts[0].text == "120"


def test_text_bounds_of_score_label(fb):
    assert fb.text_bounds("HI:0") == (24, 8)


def test_text_size_scales_bounds(fb):
    w1, h1 = fb.text_bounds("GAME OVER")
    fb.set_text_size(2)
    w2, h2 = fb.text_bounds("GAME OVER")
    assert (w2, h2) == (2 * w1, 2 * h1)


def test_non_positive_text_size_becomes_one(fb):
    fb.set_text_size(0)
    assert fb.text_size == 1


def test_newline_starts_new_line(fb):
    fb.set_cursor(40, 0)
    fb.print("A\nBC")
    _, line = fb.text_bounds("A")
    assert fb.texts[1] == TextRun(0, line, 1, "BC")
    assert fb.text_bounds("A\nBC") == (fb.text_bounds("BC")[0], 2 * line)


def test_long_text_wraps_within_width(fb):
    fb.print("X" * 40)
    assert len(fb.texts) == 2
    assert all(run.x + fb.text_bounds(run.text)[0] <= fb.width for run in fb.texts)
    assert "".join(run.text for run in fb.texts) == "X" * 40


def test_empty_text_has_no_bounds(fb):
    assert fb.text_bounds("") == (0, 0)


def test_show_latches_frame(fb):
    fb.draw_pixel(1, 1)
    fb.print("Wave")
    fb.show()
    fb.clear()
    assert fb.frames_shown == 1
    assert fb.frame[1 * 128 + 1] == 1
    assert fb.frame_texts[0].text == "Wave"


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        FrameBuffer(0, 64)