import plotly.express as px
import pandas as pd

OUTCOME_COLUMNS = ['hits', 'misses', 'evictions']


def export_set_chart(per_set, path: str):
    if not per_set:
        with open(path, "w") as f:
            f.write("<h1>Per-Set Outcomes</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(per_set)
    # Coerce counter columns, dropping rows that cannot be plotted
    for col in ['set'] + OUTCOME_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors='coerce')
    df = df.dropna(subset=['set'] + OUTCOME_COLUMNS)

    long_df = df.melt(
        id_vars=['set'],
        value_vars=OUTCOME_COLUMNS,
        var_name='outcome',
        value_name='count',
    )
    long_df['set'] = long_df['set'].astype(int).astype(str)

    fig = px.bar(
        long_df,
        x="set",
        y="count",
        color="outcome",
        barmode="group",
        title="Cache Simulation Per-Set Outcomes",
        labels={"set": "Set Index", "count": "Accesses", "outcome": "Outcome"},
    )
    fig.update_xaxes(type="category")
    fig.update_layout(
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Outcome"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_set_chart_ascii(per_set, width: int = 60, max_rows: int = 64):
    if not per_set:
        return "No cache accesses recorded."

    rows = sorted(per_set, key=lambda item: item['hits'] + item['misses'], reverse=True)
    hidden = max(0, len(rows) - max_rows)
    rows = sorted(rows[:max_rows], key=lambda item: item['set'])

    busiest = max(item['hits'] + item['misses'] for item in rows)
    scale = width / busiest if busiest > 0 else 0

    chart = "Per-Set Outcomes (ASCII) '#' hit, 'x' miss\n"
    chart += "-" * (width + 24) + "\n"
    for item in rows:
        hit_len = int(round(item['hits'] * scale))
        miss_len = int(round(item['misses'] * scale))
        lane = ('#' * hit_len + 'x' * miss_len).ljust(width)[:width]
        chart += f"{item['set']:>8} |{lane}| h={item['hits']} m={item['misses']} e={item['evictions']}\n"
    chart += "-" * (width + 24) + "\n"
    if hidden:
        chart += f"({hidden} less busy sets not shown)\n"

    return chart
