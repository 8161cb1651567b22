"""
HTML renderer for the import story using Jinja2 templates.

Renders a StoryController to a complete, standalone HTML document with:
- Every scene precomputed for every metric (and every country where the
  scene has a country picker), embedded as JSON
- Next/prev/start buttons, metric radios and a country dropdown
- D3 drawing code for each chart type, tooltips, callouts, the reveal wipe
  and legend toggling

The page never re-derives data; it only looks up the precomputed scene for
the current selection and redraws it from scratch.
"""

import json
import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, select_autoescape
from markupsafe import Markup

from importstory.data.schemas import Metric
from importstory.exceptions import ImportStoryError, StoryRenderError
from importstory.settings import Settings
from importstory.story.state import StoryController

logger = logging.getLogger(__name__)


# =============================================================================
# TEMPLATE ENVIRONMENT
# =============================================================================


def _script_json(value: Any) -> Markup:
    """JSON that is safe to embed inside a <script> element."""
    text = json.dumps(value, default=str, ensure_ascii=False)
    text = text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
    return Markup(text)


def get_template_env() -> Environment:
    """Get Jinja2 environment for story templates.

    Returns:
        Jinja2 Environment with autoescaping and the script_json filter
    """
    env = Environment(
        autoescape=select_autoescape(["html", "xml"], default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["script_json"] = _script_json
    return env


# =============================================================================
# PAYLOAD
# =============================================================================


def build_story_payload(controller: StoryController) -> dict[str, Any]:
    """Precompute every scene the page can show.

    Scenes with a country picker are rendered per (metric, country); scenes
    gated by the reveal are rendered both locked and revealed; all others
    once per metric. The controller's own state is not modified.

    Args:
        controller: Initialised story controller

    Returns:
        JSON-serialisable payload for the page script
    """
    scenes = []
    for definition in controller.scenes:
        renders: dict[str, dict[str, Any]] = {}
        for metric in Metric:
            if definition.shows_country_picker:
                renders[metric.value] = {
                    country: controller.render_definition(
                        definition, controller.context(metric=metric, selected_country=country)
                    ).to_dict()
                    for country in controller.countries
                }
            elif definition.gated_by_reveal:
                renders[metric.value] = {
                    key: controller.render_definition(
                        definition, controller.context(metric=metric, revealed=revealed)
                    ).to_dict()
                    for key, revealed in (("locked", False), ("revealed", True))
                }
            else:
                renders[metric.value] = {
                    "default": controller.render_definition(
                        definition, controller.context(metric=metric)
                    ).to_dict()
                }

        scenes.append({
            "scene_id": definition.scene_id,
            "shows_country_picker": definition.shows_country_picker,
            "shows_start": definition.shows_start,
            "gated_by_reveal": definition.gated_by_reveal,
            "renders": renders,
        })

    return {
        "title": controller.settings.title,
        "subtitle": controller.settings.subtitle,
        "variant": controller.variant,
        "metrics": [{"value": m.value, "label": m.label} for m in Metric],
        "countries": controller.countries,
        "initial": controller.controls().to_dict(),
        "scenes": scenes,
    }


# =============================================================================
# HTML RENDERING
# =============================================================================


def render_story_html(
    controller: StoryController,
    *,
    settings: Settings | None = None,
) -> str:
    """Render the story to a complete HTML document.

    Args:
        controller: Initialised story controller
        settings: Optional settings (defaults to the controller's)

    Returns:
        Complete HTML document as string

    Raises:
        StoryRenderError: If the payload cannot be serialised or the template fails
    """
    settings = settings or controller.settings

    try:
        payload = build_story_payload(controller)
        env = get_template_env()
        template = env.from_string(_get_main_template())
        html = template.render(
            title=settings.title,
            subtitle=settings.subtitle,
            payload=payload,
            metrics=payload["metrics"],
            initial_metric=controller.state.metric.value,
            d3_url=f"{settings.cdn_base}/d3@7/dist/d3.min.js",
            d3_annotation_url=f"{settings.cdn_base}/d3-svg-annotation@2.5.1/indexRollup.min.js",
            story_css=Markup(_get_story_css()),
            story_js=Markup(_get_story_js()),
        )
    except ImportStoryError:
        raise
    except (TypeError, ValueError) as e:
        raise StoryRenderError(f"Failed to render story: {e}", output_type="html") from e

    logger.info(
        f"Rendered {len(payload['scenes'])} scenes for {len(payload['countries'])} countries"
    )
    return html


def render_error_html(error: Exception, *, title: str = "Import story") -> str:
    """Render a visible error page (used when the data cannot be loaded).

    Args:
        error: The error to show
        title: Page title

    Returns:
        Complete HTML document as string
    """
    env = get_template_env()
    template = env.from_string(_get_error_template())
    message = error.message if isinstance(error, ImportStoryError) else str(error)
    source = getattr(error, "source", None)
    return template.render(
        title=title,
        message=message,
        source=source,
        error_type=type(error).__name__,
        story_css=Markup(_get_story_css()),
    )


# =============================================================================
# INLINE TEMPLATES
# =============================================================================


def _get_main_template() -> str:
    """Get the main story HTML template."""
    return '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }}</title>
    <style>
{{ story_css }}
    </style>
</head>
<body>
    <header class="story-header">
        <h1>{{ title }}</h1>
        <p class="subtitle">{{ subtitle }}</p>
    </header>

    <main class="story">
        <div class="controls">
            <button id="prev" type="button">Prev</button>
            <button id="next" type="button">Next</button>
            <button id="start" type="button" class="hidden">Start</button>

            <fieldset class="metric-control">
                <legend>Metric</legend>
                {% for metric in metrics %}
                <label>
                    <input type="radio" name="metric" value="{{ metric.value }}"
                        {% if metric.value == initial_metric %}checked{% endif %}>
                    {{ metric.label }}
                </label>
                {% endfor %}
            </fieldset>

            <label id="country-control" class="hidden">
                Country
                <select id="countrySelect"></select>
            </label>
        </div>

        <section class="scene">
            <h2 id="scene-headline"></h2>
            <p id="scene-text"></p>
            <div id="vis"></div>
        </section>
    </main>

    <div id="tooltip" class="tooltip hidden"></div>

    <script src="{{ d3_url }}"></script>
    <script src="{{ d3_annotation_url }}"></script>
    <script>
        window.STORY_DATA = {{ payload | script_json }};
    </script>
    <script>
{{ story_js }}
    </script>
</body>
</html>'''


def _get_error_template() -> str:
    """Get the error page template."""
    return '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ title }}: data unavailable</title>
    <style>
{{ story_css }}
    </style>
</head>
<body>
    <header class="story-header">
        <h1>{{ title }}</h1>
    </header>
    <main class="story">
        <div class="load-error" role="alert">
            <h2>The data could not be loaded</h2>
            <p class="error-message">{{ message }}</p>
            {% if source %}
            <p class="error-source">Source: <code>{{ source }}</code></p>
            {% endif %}
            <p class="error-type">{{ error_type }}</p>
        </div>
    </main>
</body>
</html>'''


def _get_story_css() -> str:
    """Get embedded CSS for the story page."""
    return '''
*, *::before, *::after { box-sizing: border-box; }
:root { --accent: #4e79a7; }
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    line-height: 1.5;
    color: #1a202c;
    background: #f7fafc;
    margin: 0;
}
.story-header {
    background: linear-gradient(135deg, #2d3748 0%, #1a202c 100%);
    color: white;
    padding: 2rem;
    text-align: center;
}
.story-header h1 { margin: 0; font-size: 2rem; }
.story-header .subtitle { margin: 0.25rem 0 0; opacity: 0.85; }
.story { max-width: 960px; margin: 0 auto; padding: 1.5rem; }
.controls {
    display: flex;
    gap: 1rem;
    align-items: center;
    flex-wrap: wrap;
    margin-bottom: 1rem;
}
.controls button {
    padding: 0.4rem 1rem;
    border: 1px solid #cbd5e0;
    border-radius: 6px;
    background: white;
    cursor: pointer;
}
.controls button[disabled] { opacity: 0.4; cursor: default; }
.metric-control { border: none; display: flex; gap: 0.75rem; margin: 0; padding: 0; }
.metric-control legend { float: left; margin-right: 0.5rem; font-weight: 600; }
.hidden { display: none !important; }
.scene {
    background: white;
    border-radius: 12px;
    box-shadow: 0 4px 6px rgba(0,0,0,0.05);
    padding: 1.5rem;
}
#scene-headline { margin: 0 0 0.5rem; font-size: 1.35rem; }
#scene-text { margin: 0 0 1rem; color: #4a5568; }
#vis svg { max-width: 100%; height: auto; }
.axis text { font-size: 11px; fill: #4a5568; }
.line { fill: none; stroke-width: 2; }
.annotation-group text { font-size: 12px; }
.annotation-group .annotation-note-title { font-weight: 600; }
.annotation-group .annotation path { stroke: #333; }
.legend-item { cursor: pointer; font-size: 12px; }
.legend-item.inactive { opacity: 0.35; }
.tooltip {
    position: absolute;
    pointer-events: none;
    background: rgba(26, 32, 44, 0.9);
    color: white;
    padding: 0.4rem 0.6rem;
    border-radius: 4px;
    font-size: 12px;
}
.load-error {
    background: #fff5f5;
    border-left: 4px solid #e53e3e;
    border-radius: 8px;
    padding: 1.5rem;
}
.load-error h2 { margin-top: 0; color: #c53030; }
.error-type { color: #718096; font-size: 0.85rem; }
'''


def _get_story_js() -> str:
    """Get embedded JavaScript for the story page."""
    return '''
(function() {
    const STORY = window.STORY_DATA;
    if (!STORY) return;

    // Selection state; mirrors the Python StoryState
    const state = {
        sceneIndex: STORY.initial.scene_index,
        metric: STORY.initial.metric,
        country: STORY.initial.selected_country,
        revealed: false,
        active: new Set(STORY.countries),
    };
    const tooltip = d3.select('#tooltip');
    const parseDate = d3.isoParse;

    function currentMeta() { return STORY.scenes[state.sceneIndex]; }

    function currentScene() {
        const meta = currentMeta();
        const renders = meta.renders[state.metric];
        if (meta.shows_country_picker) return renders[state.country] || Object.values(renders)[0];
        if (meta.gated_by_reveal) return renders[state.revealed ? 'revealed' : 'locked'];
        return renders['default'];
    }

    // ---------------------- Controls --------------------------
    function initControls() {
        d3.select('#next').on('click', () => {
            state.sceneIndex = Math.min(state.sceneIndex + 1, STORY.scenes.length - 1);
            render();
        });
        d3.select('#prev').on('click', () => {
            state.sceneIndex = Math.max(state.sceneIndex - 1, 0);
            render();
        });
        d3.select('#start').on('click', () => {
            state.sceneIndex = Math.min(1, STORY.scenes.length - 1);
            render();
        });
        d3.selectAll('input[name="metric"]').on('change', (event) => {
            state.metric = event.target.value;
            render();
        });
        d3.select('#countrySelect')
            .on('change', (event) => {
                state.country = event.target.value;
                render();
            })
            .selectAll('option')
            .data(STORY.countries)
            .join('option')
            .attr('value', d => d)
            .property('selected', d => d === state.country)
            .text(d => d);
    }

    function updateControls() {
        const meta = currentMeta();
        d3.select('#prev').attr('disabled', state.sceneIndex === 0 ? true : null);
        d3.select('#next').attr('disabled', state.sceneIndex === STORY.scenes.length - 1 ? true : null);
        d3.select('#country-control').classed('hidden', !meta.shows_country_picker);
        d3.select('#start').classed('hidden', !meta.shows_start);
    }

    // ---------------------- Render Switch ---------------------
    const RENDERERS = {
        title_card: renderTitleCard,
        diverging_bar: renderBars,
        multi_line: renderLines,
        single_line: renderSingleLine,
    };

    function render() {
        updateControls();
        hideTooltip();
        d3.select('#vis').html('');

        const scene = currentScene();
        d3.select('#scene-headline').text(scene.narrative.headline);
        d3.select('#scene-text').text(scene.narrative.body);

        const spec = scene.chart;
        const svg = d3.select('#vis')
            .append('svg')
            .attr('width', spec.config.width)
            .attr('height', spec.config.height)
            .attr('viewBox', `0 0 ${spec.config.width} ${spec.config.height}`);

        const renderer = RENDERERS[spec.chart_type];
        const project = renderer ? renderer(svg, spec) : null;
        if (project) addAnnotations(svg, spec.annotations, project);
        playTransitions(svg, spec);
    }

    // ---------------------- Chart Renderers -------------------
    function renderTitleCard(svg, spec) {
        const {width, height} = spec.config;
        svg.append('text')
            .attr('x', width / 2).attr('y', height / 2 - 20)
            .attr('text-anchor', 'middle')
            .attr('font-size', spec.config.titleSize).attr('font-weight', 600)
            .text(spec.data.title);
        svg.append('text')
            .attr('x', width / 2).attr('y', height / 2 + 15)
            .attr('text-anchor', 'middle')
            .attr('font-size', spec.config.subtitleSize)
            .text(spec.data.subtitle);
        return null;
    }

    function renderBars(svg, spec) {
        const {width, height, margins: m} = spec.config;
        const bars = spec.data.bars;

        const x = d3.scaleLinear()
            .domain(spec.config.xDomain).nice()
            .range([m.left, width - m.right]);
        const y = d3.scaleBand()
            .domain(bars.map(d => d.country))
            .range([m.top, height - m.bottom])
            .padding(spec.config.bandPadding);

        svg.append('g').attr('class', 'axis')
            .attr('transform', `translate(0,${m.top})`)
            .call(d3.axisTop(x).tickFormat(d3.format(spec.config.xTickFormat)))
            .call(g => g.select('.domain').remove());
        svg.append('g').attr('class', 'axis')
            .attr('transform', `translate(${m.left},0)`)
            .call(d3.axisLeft(y))
            .call(g => g.select('.domain').remove());

        const rects = svg.selectAll('.bar')
            .data(bars)
            .join('rect')
            .attr('class', d => `bar ${d.direction}`)
            .attr('fill', d => d.direction === 'rise' ? spec.config.riseColor : spec.config.declineColor)
            .attr('x', d => x(Math.min(0, d.change_abs)))
            .attr('y', d => y(d.country))
            .attr('height', y.bandwidth())
            .attr('width', d => Math.abs(x(d.change_abs) - x(0)));
        if (spec.interactions.tooltips) {
            rects.on('mousemove', (event, d) => showTooltip(event, d.tooltip))
                .on('mouseleave', hideTooltip);
        }

        if (spec.config.zeroLine) {
            svg.append('line')
                .attr('x1', x(0)).attr('x2', x(0))
                .attr('y1', m.top).attr('y2', height - m.bottom)
                .attr('stroke', '#666')
                .attr('stroke-dasharray', '3,3');
        }
        return a => [x(a.x), y(a.y) + y.bandwidth() / 2];
    }

    function timeAxes(svg, spec) {
        const {width, height, margins: m} = spec.config;
        const x = d3.scaleTime()
            .domain(spec.config.xDomain.map(parseDate))
            .range([m.left, width - m.right]);
        const y = d3.scaleLinear()
            .domain(spec.config.yDomain).nice()
            .range([height - m.bottom, m.top]);

        svg.append('g').attr('class', 'axis')
            .attr('transform', `translate(0,${height - m.bottom})`)
            .call(d3.axisBottom(x).ticks(width / 90).tickSizeOuter(0));
        svg.append('g').attr('class', 'axis')
            .attr('transform', `translate(${m.left},0)`)
            .call(d3.axisLeft(y).ticks(spec.config.yTicks).tickFormat(d3.format(spec.config.yTickFormat)));
        return {x, y};
    }

    function renderLines(svg, spec) {
        const {x, y} = timeAxes(svg, spec);
        const line = d3.line().x(p => x(parseDate(p.date))).y(p => y(p.value));
        const isHidden = d => spec.interactions.legend ? !state.active.has(d.country) : d.hidden;

        const paths = svg.append('g').attr('class', 'lines')
            .selectAll('path')
            .data(spec.data.lines)
            .join('path')
            .attr('class', 'line')
            .attr('stroke', d => d.color)
            .attr('d', d => line(d.points))
            .style('display', d => isHidden(d) ? 'none' : null);

        if (spec.interactions.tooltips) {
            const bisect = d3.bisector(p => parseDate(p.date)).center;
            paths.on('mousemove', (event, d) => {
                const [mx] = d3.pointer(event);
                const i = bisect(d.points, x.invert(mx));
                showTooltip(event, d.points[i].tooltip);
            }).on('mouseleave', hideTooltip);
        }
        if (spec.interactions.legend && spec.data.legend) renderLegend(svg, spec);
        return a => [x(parseDate(a.x)), y(a.y)];
    }

    function renderSingleLine(svg, spec) {
        const {x, y} = timeAxes(svg, spec);
        const points = spec.data.points;
        const line = d3.line().x(p => x(parseDate(p.date))).y(p => y(p.value));

        svg.append('path')
            .datum(points)
            .attr('class', 'line')
            .attr('stroke', spec.data.color)
            .attr('d', line);

        const dots = svg.selectAll('circle.point')
            .data(points)
            .join('circle')
            .attr('class', 'point')
            .attr('cx', p => x(parseDate(p.date)))
            .attr('cy', p => y(p.value))
            .attr('r', spec.config.pointRadius)
            .attr('fill', spec.data.color);
        if (spec.interactions.tooltips) {
            dots.on('mousemove', (event, p) => showTooltip(event, p.tooltip))
                .on('mouseleave', hideTooltip);
        }
        return a => [x(parseDate(a.x)), y(a.y)];
    }

    // Legend membership is the explicit state.active set
    function renderLegend(svg, spec) {
        const {width, margins: m} = spec.config;
        const items = svg.append('g')
            .attr('class', 'legend')
            .attr('transform', `translate(${width - m.right - 140},${m.top})`)
            .selectAll('g')
            .data(spec.data.legend)
            .join('g')
            .attr('class', d => `legend-item ${state.active.has(d.country) ? '' : 'inactive'}`)
            .attr('transform', (d, i) => `translate(0,${i * 18})`)
            .on('click', (event, d) => {
                if (state.active.has(d.country)) state.active.delete(d.country);
                else state.active.add(d.country);
                render();
            });
        items.append('rect').attr('width', 12).attr('height', 12).attr('fill', d => d.color);
        items.append('text').attr('x', 18).attr('y', 10).text(d => d.country);
    }

    // ---------------------- Annotations -----------------------
    function addAnnotations(svg, annotations, project) {
        if (!annotations || !annotations.length) return;
        const notes = [];
        annotations.forEach(a => {
            const [px, py] = project(a);
            if (!isFinite(px) || !isFinite(py)) return;
            notes.push({
                type: d3.annotationCalloutElbow,
                note: {title: a.title, label: a.label},
                x: px, y: py, dx: a.dx, dy: a.dy,
            });
        });
        const makeAnnotations = d3.annotation().annotations(notes);
        svg.append('g').attr('class', 'annotation-group').call(makeAnnotations);
    }

    // ---------------------- Transitions -----------------------
    function playTransitions(svg, spec) {
        (spec.transitions || []).forEach(t => {
            if (t.type !== 'wipe') return;
            const {width, height} = spec.config;
            const clipId = `clip-${spec.chart_id}`;
            const rect = svg.append('clipPath').attr('id', clipId)
                .append('rect').attr('x', 0).attr('y', 0).attr('width', 0).attr('height', height);
            svg.selectAll('.lines, .annotation-group').attr('clip-path', `url(#${clipId})`);
            rect.transition()
                .duration(t.duration)
                .ease(d3.easeLinear)
                .attr('width', width)
                .on('end', () => {
                    if (t.on_end === 'complete_reveal' && !state.revealed) {
                        state.revealed = true;
                        render();
                    }
                });
        });
    }

    // ---------------------- Tooltip ---------------------------
    function showTooltip(event, html) {
        tooltip.html(html)
            .style('left', (event.pageX + 12) + 'px')
            .style('top', (event.pageY + 12) + 'px')
            .classed('hidden', false);
    }
    function hideTooltip() { tooltip.classed('hidden', true); }

    initControls();
    render();
})();
'''


# =============================================================================
# FILE OUTPUT
# =============================================================================


def save_story_html(html: str, output_path: Path | str) -> Path:
    """Save rendered HTML to file.

    Args:
        html: The rendered HTML string
        output_path: Path to write HTML file

    Returns:
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html)

    logger.info(f"Saved story to {output_path}")
    return output_path
