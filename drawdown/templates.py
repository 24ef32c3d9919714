"""HTML template assets for report rendering."""

from __future__ import annotations


def render_html_document(
    *,
    title: str,
    subtitle: str,
    info_panel: str,
    summary_block: str,
    report_body: str,
    validation_table: str,
    payload_json: str,
) -> str:
    return f"""<!doctype html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
  <title>{title}</title>
  <style>
    :root {{
      --bg: #eef3f1;
      --panel: #ffffff;
      --ink: #1f2937;
      --muted: #6b7280;
      --line: #c9d8d2;
      --brand: #0f5132;
      --best: #d1fae5;
      --warn: #991b1b;
    }}
    * {{ box-sizing: border-box; }}
    body {{ margin: 0; font-family: 'Segoe UI', Roboto, sans-serif; color: var(--ink); background: var(--bg); }}
    .wrap {{ max-width: 1280px; margin: 0 auto; padding: 1rem; }}
    h1 {{ margin: 0.1rem 0 0.25rem; font-size: 1.9rem; }}
    h2.age-title {{ font-size: 1.15rem; margin: 1.2rem 0 0.4rem; }}
    .meta {{ color: var(--muted); font-size: 0.95rem; margin-bottom: 0.8rem; }}
    .tabs {{ display: flex; flex-wrap: wrap; gap: 0.5rem; margin: 0.75rem 0; }}
    .tab-btn {{ border: 1px solid var(--line); background: #fff; padding: 0.45rem 0.75rem; cursor: pointer; border-radius: 999px; font-weight: 700; }}
    .tab-btn.active {{ background: var(--brand); color: #fff; border-color: var(--brand); }}
    .tab {{ display: none; }}
    .tab.active {{ display: block; }}
    .panel {{ background: var(--panel); border: 1px solid var(--line); border-radius: 12px; padding: 0.85rem; margin-bottom: 0.85rem; }}
    .summary-block p {{ margin: 0.2rem 0; }}
    details.advanced summary, details.strategy-desc summary {{ cursor: pointer; font-weight: 700; }}
    .strategy-desc-content {{ color: var(--muted); margin: 0.35rem 0 0.6rem; }}
    canvas {{ width: 100%; height: 320px; display: block; background: #fff; border: 1px solid var(--line); border-radius: 10px; }}
    table {{ border-collapse: collapse; width: 100%; font-size: 0.9rem; margin-bottom: 0.8rem; }}
    th, td {{ border: 1px solid var(--line); padding: 0.35rem 0.45rem; text-align: right; }}
    th:first-child, td:first-child {{ text-align: left; }}
    td.best {{ background: var(--best); font-weight: 700; }}
    tr.shortfall td {{ background: #ffe3e3; color: var(--warn); }}
    tr.strategy-1 td.strategy-column {{ border-left: 4px solid #2563eb; }}
    tr.strategy-2 td.strategy-column {{ border-left: 4px solid #16a34a; }}
    tr.strategy-3 td.strategy-column {{ border-left: 4px solid #f97316; }}
    tr.strategy-3a td.strategy-column {{ border-left: 4px solid #7c3aed; }}
    tr.strategy-4 td.strategy-column {{ border-left: 4px solid #db2777; }}
    tr.strategy-5 td.strategy-column {{ border-left: 4px solid #0891b2; }}
    .subtle {{ color: var(--muted); font-size: 0.85rem; }}
    @media (max-width: 700px) {{
      h1 {{ font-size: 1.5rem; }}
      .tab-btn {{ font-size: 0.9rem; }}
      canvas {{ height: 240px; }}
    }}
  </style>
</head>
<body>
  <div class=\"wrap\">
    <h1>{title}</h1>
    <div class=\"meta\">{subtitle}</div>
    <div class=\"panel\">{info_panel}</div>
    <div class=\"tabs\" id=\"tabs\">
      <button class=\"tab-btn active\" data-tab=\"report\">Report</button>
      <button class=\"tab-btn\" data-tab=\"chart\">Wealth Chart</button>
      <button class=\"tab-btn\" data-tab=\"validation\">Plan Validation</button>
    </div>

    <section class=\"tab active\" id=\"tab-report\">
      <div class=\"panel summary-block\">{summary_block}</div>
      <div class=\"panel\">{report_body}</div>
    </section>

    <section class=\"tab\" id=\"tab-chart\">
      <div class=\"panel\">
        <label for=\"chart-spend\">Spending: </label>
        <select id=\"chart-spend\"></select>
        <p class=\"subtle\">Total wealth (pension + savings) at the end of each year.</p>
      </div>
      <div class=\"panel\"><canvas id=\"chart-wealth\"></canvas></div>
    </section>

    <section class=\"tab\" id=\"tab-validation\">
      <div class=\"panel\">{validation_table}</div>
    </section>
  </div>

  <script>
    const payload = {payload_json};
    const palette = ['#2563eb', '#16a34a', '#f97316', '#7c3aed', '#db2777', '#0891b2'];

    function fmtMoney(v) {{
      return '\\u00a3' + (Number(v || 0)).toLocaleString(undefined, {{ maximumFractionDigits: 0 }});
    }}

    function tabsInit() {{
      const buttons = [...document.querySelectorAll('.tab-btn')];
      buttons.forEach((btn) => {{
        btn.addEventListener('click', () => {{
          buttons.forEach((b) => b.classList.remove('active'));
          btn.classList.add('active');
          [...document.querySelectorAll('.tab')].forEach((tab) => tab.classList.remove('active'));
          document.getElementById(`tab-${{btn.dataset.tab}}`).classList.add('active');
          renderChart();
        }});
      }});
    }}

    function drawAxes(ctx, w, h) {{
      ctx.strokeStyle = '#ddd';
      ctx.lineWidth = 1;
      ctx.beginPath();
      ctx.moveTo(56, 10); ctx.lineTo(56, h - 24); ctx.lineTo(w - 8, h - 24); ctx.stroke();
    }}

    function drawLines(canvasId, ages, seriesByName, title) {{
      const c = document.getElementById(canvasId); if (!c) return;
      const rect = c.getBoundingClientRect(); c.width = Math.max(380, Math.floor(rect.width)); c.height = Math.floor(rect.height);
      const ctx = c.getContext('2d'); const w = c.width, h = c.height;
      ctx.clearRect(0, 0, w, h); drawAxes(ctx, w, h);
      const names = Object.keys(seriesByName);
      const all = names.flatMap((n) => seriesByName[n].map(Number));
      const maxV = Math.max(1, ...all);
      names.forEach((name, idx) => {{
        const vals = seriesByName[name].map(Number);
        ctx.strokeStyle = palette[idx % palette.length]; ctx.lineWidth = 2; ctx.beginPath();
        vals.forEach((v, i) => {{
          const x = 56 + (i * (w - 72) / Math.max(1, vals.length - 1));
          const y = (h - 24) - (v / maxV) * (h - 38);
          if (i === 0) ctx.moveTo(x, y); else ctx.lineTo(x, y);
        }});
        ctx.stroke();
        ctx.fillStyle = palette[idx % palette.length]; ctx.font = '11px sans-serif';
        ctx.fillText(name, w - 110, 20 + idx * 14);
      }});
      ctx.fillStyle = '#111'; ctx.font = 'bold 12px sans-serif'; ctx.fillText(title, 62, 22);
      ctx.fillStyle = '#666'; ctx.font = '11px sans-serif';
      ctx.fillText(String(ages[0] ?? ''), 56, h - 8);
      ctx.fillText(String(ages[ages.length - 1] ?? ''), w - 40, h - 8);
      ctx.fillText(fmtMoney(maxV), 4, 20);
    }}

    function renderChart() {{
      const select = document.getElementById('chart-spend');
      const group = payload.charts.series[Number(select.value || 0)];
      if (!group) return;
      drawLines('chart-wealth', payload.charts.ages, group.totals, `Total wealth, spending ${{group.label}}`);
    }}

    function chartInit() {{
      const select = document.getElementById('chart-spend');
      payload.charts.series.forEach((group, idx) => {{
        const opt = document.createElement('option');
        opt.value = String(idx); opt.textContent = group.label;
        select.appendChild(opt);
      }});
      select.addEventListener('change', () => renderChart());
      renderChart();
    }}

    tabsInit();
    chartInit();
    addEventListener('resize', () => renderChart());
  </script>
</body>
</html>
"""
