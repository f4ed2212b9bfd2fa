"""Tests for whole-drawing analysis."""

from canvas_observer.engine.drawing_analysis import analyze_drawing
from canvas_observer.engine.entities import Point
from tests.conftest import circle_points, line_points, make_stroke


def _circle(i=0):
    return make_stroke(circle_points(40, 16, cx=100 + 150 * i), stroke_id=f"c{i}")


def _line(i=0):
    return make_stroke(line_points((0, 50 * i), (120, 50 * i), 8), stroke_id=f"l{i}")


def _scribble():
    return make_stroke([Point(0, 0), Point(5, 40), Point(10, 0), Point(15, 40), Point(20, 0)], stroke_id="x")


def test_empty_drawing():
    result = analyze_drawing([])
    assert result.shapes == []
    assert result.smart_suggestions == []


def test_single_circle_suggests_fraction_bar():
    result = analyze_drawing([_circle()])
    assert result.patterns == ["1 circle detected"]
    assert "Explore radius and diameter" in result.suggestions
    assert [s.manipulative for s in result.smart_suggestions] == ["fraction-bar"]


def test_multiple_circles_suggest_graph_paper():
    result = analyze_drawing([_circle(0), _circle(1)])
    assert result.patterns == ["2 circles detected"]
    assert result.smart_suggestions[0].manipulative == "graph-paper"


def test_two_lines_suggest_number_line_and_triangle():
    result = analyze_drawing([_line(0), _line(1)])
    assert "2 lines detected" in result.patterns
    assert [s.manipulative for s in result.smart_suggestions] == ["number-line", "triangle"]


def test_single_line_has_no_line_pattern():
    result = analyze_drawing([_line()])
    assert len(result.shapes) == 1
    assert result.patterns == []


def test_mixed_shapes():
    result = analyze_drawing([_circle(), _line(0), _line(1)])
    assert "Mix of circles and lines - geometric exploration!" in result.patterns
    manipulatives = [s.manipulative for s in result.smart_suggestions]
    assert "graph-paper" in manipulatives
    assert manipulatives[-1] == "calculator"


def test_unrecognized_drawing_gets_creative_suggestion():
    result = analyze_drawing([_scribble()])
    assert result.shapes == []
    assert result.smart_suggestions[0].message.startswith("Creative drawing")
