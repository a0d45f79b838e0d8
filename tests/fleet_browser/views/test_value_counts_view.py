import plotly.graph_objs as go

from fleet_browser.core.dataset import Dataset
from fleet_browser.core.query import Query
from fleet_browser.views.value_counts_view import ValueCountsView


def _make_dataset(n_models=3):
    records = [{"דגם": f"model-{i % n_models}", "אזור": "צפון" if i % 2 else "דרום"} for i in range(12)]
    return Dataset(name="vehicles", path="/data/data", records=records)


def test_compute_data_counts_filtered_records():
    view = ValueCountsView(_make_dataset(), {"field": "אזור"})

    df = view.compute_data(Query(allowed={"אזור": ["צפון"]}))

    assert list(df["value"]) == ["צפון"]
    assert list(df["count"]) == [6]


def test_field_defaults_to_first_dataset_field():
    view = ValueCountsView(_make_dataset())
    assert view.field == "דגם"


def test_render_pie_for_few_values_and_bar_for_many():
    few = ValueCountsView(_make_dataset(3), {"field": "דגם"})
    many = ValueCountsView(_make_dataset(12), {"field": "דגם"})

    pie = few.render_figure(few.compute_data(Query()), Query())
    bar = many.render_figure(many.compute_data(Query()), Query())

    assert isinstance(pie, go.Figure)
    assert pie.data[0].type == "pie"
    assert bar.data[0].type == "bar"
    assert "12" in pie.layout.title.text


def test_chart_option_overrides_suggestion():
    view = ValueCountsView(_make_dataset(3), {"field": "דגם", "chart": "bar"})
    fig = view.render_figure(view.compute_data(Query()), Query())
    assert fig.data[0].type == "bar"


def test_render_empty_selection():
    view = ValueCountsView(_make_dataset(), {"field": "דגם"})
    query = Query(term="no such value")

    fig = view.render_figure(view.compute_data(query), query)

    assert len(fig.data) == 0
    assert fig.layout.title.text
