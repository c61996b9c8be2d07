"""
Self-contained HTML output for a lineage view.

The graph document is embedded as JSON and drawn with inline SVG, so the
file works directly from file:// with no external fetches.
"""

import html
import json
import logging
import re
from pathlib import Path
from typing import Optional

from ..models.dataclasses import LineageView
from ..processor.graph_index import GraphIndex
from .presenter import build_graph_document

logger = logging.getLogger(__name__)

NODE_WIDTH = 220
NODE_HEIGHT = 80


class HtmlWriter:
    """Write a lineage view as a standalone HTML diagram."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(self, view: LineageView, index: GraphIndex,
              filename: Optional[str] = None) -> Path:
        root = re.sub(r"[^A-Za-z0-9_.-]+", "_", view.query.root_id or "NO_ROOT")
        html_file = self.output_dir / (filename or f"{root}_lineage.html")

        with open(html_file, "w", encoding="utf-8") as f:
            f.write(self.render(view, index))

        logger.info(f"Created: {html_file}")
        return html_file

    def render(self, view: LineageView, index: GraphIndex) -> str:
        document = build_graph_document(view, index)
        # Keep "</script>" inside string values from closing the script tag
        graph_json = json.dumps(document).replace("</", "<\\/")

        root = index.component_by_id(view.query.root_id) if view.query.root_id else None
        title = f"Lineage: {root.name}" if root else "Data Lineage Explorer"
        subtitle = (
            f"{view.query.direction.value} &bull; {view.result.depth} "
            f"level{'s' if view.result.depth > 1 else ''}"
        )

        return f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>
{self._get_css()}
    </style>
</head>
<body>
    <header class="header">
        <h1>{html.escape(title)}</h1>
        <span class="subtitle">{subtitle}</span>
    </header>
    <div class="graph-container" id="graph-container">
        <svg id="graph" xmlns="http://www.w3.org/2000/svg"></svg>
        <p class="placeholder" id="placeholder">Select a component to visualize its lineage</p>
    </div>
    <ul class="warnings" id="warnings"></ul>

    <script>
// Embedded Data
const GRAPH = {graph_json};
const NODE_WIDTH = {NODE_WIDTH};
const NODE_HEIGHT = {NODE_HEIGHT};

{self._get_js()}
    </script>
</body>
</html>'''

    def _get_css(self) -> str:
        return """
        * { box-sizing: border-box; }
        body { margin: 0; font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif;
               background: #f9fafb; color: #111827; }
        .header { display: flex; align-items: baseline; gap: 16px; padding: 12px 24px;
                  background: #fff; border-bottom: 1px solid #e5e7eb; }
        .header h1 { font-size: 20px; margin: 0; }
        .subtitle { color: #2563eb; font-size: 13px; }
        .graph-container { position: relative; height: calc(100vh - 60px); overflow: auto; }
        #graph { display: block; }
        .placeholder { position: absolute; inset: 0; display: none; align-items: center;
                       justify-content: center; color: #6b7280; font-size: 18px; }
        .node rect { fill: #fff; stroke-width: 2; rx: 10; }
        .node.selected rect { stroke-width: 5; }
        .node .name { font-size: 14px; font-weight: 600; }
        .node .meta { font-size: 11px; fill: #6b7280; }
        .node .failed { font-size: 11px; fill: #dc2626; font-weight: 600; }
        .edge { fill: none; stroke-width: 2; }
        .edge-label { font-size: 11px; fill: #374151; }
        .warnings { margin: 0; padding: 8px 24px; color: #b45309; font-size: 12px; }
"""

    def _get_js(self) -> str:
        return """
const SVG_NS = 'http://www.w3.org/2000/svg';

function el(tag, attrs, parent) {
    const node = document.createElementNS(SVG_NS, tag);
    Object.entries(attrs || {}).forEach(([k, v]) => node.setAttribute(k, v));
    if (parent) parent.appendChild(node);
    return node;
}

function draw() {
    const svg = document.getElementById('graph');
    if (!GRAPH.nodes.length) {
        document.getElementById('placeholder').style.display = 'flex';
        return;
    }

    const xs = GRAPH.nodes.map(n => n.position.x);
    const ys = GRAPH.nodes.map(n => n.position.y);
    const pad = 60;
    const minX = Math.min(...xs) - pad, minY = Math.min(...ys) - pad;
    const width = Math.max(...xs) - minX + NODE_WIDTH + pad;
    const height = Math.max(...ys) - minY + NODE_HEIGHT + pad;
    svg.setAttribute('width', width);
    svg.setAttribute('height', height);
    svg.setAttribute('viewBox', `${minX} ${minY} ${width} ${height}`);

    const defs = el('defs', {}, svg);
    const marker = el('marker', {id: 'arrow', markerWidth: 10, markerHeight: 10, refX: 9, refY: 5,
                                 orient: 'auto'}, defs);
    el('path', {d: 'M0,0 L10,5 L0,10 z', fill: '#6B7280'}, marker);

    const byId = new Map(GRAPH.nodes.map(n => [n.id, n]));
    const edgeLayer = el('g', {}, svg);
    GRAPH.edges.forEach(edge => {
        const s = byId.get(edge.source), t = byId.get(edge.target);
        if (!s || !t) return;
        const x1 = s.position.x + NODE_WIDTH, y1 = s.position.y + NODE_HEIGHT / 2;
        const x2 = t.position.x, y2 = t.position.y + NODE_HEIGHT / 2;
        const mx = (x1 + x2) / 2;
        const path = el('path', {
            class: 'edge', d: `M${x1},${y1} C${mx},${y1} ${mx},${y2} ${x2},${y2}`,
            stroke: edge.data.color, 'marker-end': 'url(#arrow)'
        }, edgeLayer);
        el('title', {}, path).textContent = `${edge.source} → ${edge.target} (${edge.data.relationship})`;
        const label = el('text', {class: 'edge-label', x: mx, y: (y1 + y2) / 2 - 4,
                                  'text-anchor': 'middle'}, edgeLayer);
        label.textContent = edge.label;
    });

    const nodeLayer = el('g', {}, svg);
    GRAPH.nodes.forEach(node => {
        const c = node.data.component;
        const g = el('g', {class: 'node' + (node.data.is_selected ? ' selected' : ''),
                           transform: `translate(${node.position.x},${node.position.y})`}, nodeLayer);
        el('rect', {width: NODE_WIDTH, height: NODE_HEIGHT, stroke: node.data.color}, g);
        el('text', {class: 'name', x: 12, y: 24}, g).textContent = c.name;
        el('text', {class: 'meta', x: 12, y: 42}, g).textContent =
            c.type.replace(/_/g, ' ') + (c.database ? ' · ' + c.database : '');
        el('text', {class: 'meta', x: 12, y: 58}, g).textContent = c.environment;
        if (c.has_failed) {
            const failures = c.failure ? ` (${c.failure.failure_count}x ${c.failure.pipeline_name})` : '';
            el('text', {class: 'failed', x: 12, y: 73}, g).textContent = 'Failed' + failures;
        }
        el('title', {}, g).textContent = `${c.id} · level ${node.data.level}`;
    });

    const list = document.getElementById('warnings');
    GRAPH.warnings.forEach(w => {
        const li = document.createElement('li');
        li.textContent = `${w.kind}: ${w.subject_id} - ${w.message}`;
        list.appendChild(li);
    });
}

draw();
"""
