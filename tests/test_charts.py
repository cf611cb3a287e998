"""Tests for dashboard/charts.py — Plotly figure builders."""

import plotly.graph_objects as go
from dashboard.charts import price_comparison_chart, sample_price_chart


class TestSamplePriceChart:
    def test_cheapest_on_top(self, graph):
        fig = sample_price_chart(graph.models, "Hello world", "Hello world")
        assert isinstance(fig, go.Figure)
        names = list(fig.data[0].y)
        # Unpriced models are left out; horizontal bars draw bottom-up
        assert names == ["Claude 3 Opus", "Claude 3 Haiku", "Gemini 1.5 Flash"]

    def test_limit(self, graph):
        fig = sample_price_chart(graph.models, "Hello", "World", limit=1)
        assert list(fig.data[0].y) == ["Gemini 1.5 Flash"]

    def test_empty(self):
        fig = sample_price_chart([], "Hello", "World")
        assert len(fig.data[0].x) == 0


class TestPriceComparisonChart:
    def test_input_and_output_traces(self, graph):
        fig = price_comparison_chart(graph.models)
        assert [t.name for t in fig.data] == ["Input", "Output"]
        assert list(fig.data[0].x) == ["Gemini 1.5 Flash", "Claude 3 Haiku", "Claude 3 Opus"]
        assert list(fig.data[1].y) == [0.3, 1.25, 75.0]
        assert fig.layout.barmode == "group"
