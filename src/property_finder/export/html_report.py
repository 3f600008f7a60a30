"""Render the display list as an HTML page with listing cards and a map."""

from pathlib import Path
from typing import Optional

import folium
from jinja2 import Template
from rich.console import Console

from property_finder.config.settings import (
    HTML_FILENAME,
    MAP_DEFAULT_ZOOM,
)
from property_finder.pipeline import DisplayList

console = Console()

HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Find Your Next Property</title>
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: #f5f5f5; }
        .container { max-width: 1400px; margin: 0 auto; padding: 20px; }
        header { background: #2c3e50; color: white; padding: 20px; margin-bottom: 20px; border-radius: 8px; }
        header h1 { font-size: 1.8rem; margin-bottom: 5px; }
        header p { opacity: 0.8; }
        .status { background: white; padding: 12px 20px; border-radius: 8px; margin-bottom: 20px; color: #2c3e50; }
        .status-unavailable { color: #e67e22; }
        .map { margin-bottom: 20px; border-radius: 8px; overflow: hidden; }
        .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(300px, 1fr)); gap: 20px; }
        .card { background: white; border-radius: 8px; overflow: hidden; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .card img { width: 100%; height: 180px; object-fit: cover; }
        .card-body { padding: 15px; }
        .card h2 { font-size: 1.1rem; margin-bottom: 5px; }
        .address { color: #666; font-size: 0.85rem; margin-bottom: 8px; }
        .price { font-weight: bold; color: #27ae60; font-size: 1.1rem; }
        .meta { font-size: 0.85rem; color: #444; margin: 6px 0; }
        .tag { display: inline-block; padding: 2px 6px; border-radius: 3px; font-size: 0.75rem; margin: 2px 4px 2px 0; background: #d5f5e3; color: #27ae60; }
        .tag-type { background: #d6eaf8; color: #2874a6; }
        .distance { font-size: 0.8rem; color: #3498db; }
        .no-results { text-align: center; padding: 40px; color: #666; }
    </style>
</head>
<body>
    <div class="container">
        <header>
            <h1>Find Your Next Property</h1>
            <p>{{ entries|length }} of {{ total }} listings match{% if search_term %} "{{ search_term }}"{% endif %}</p>
        </header>

        <div class="status {% if status == 'unavailable' %}status-unavailable{% endif %}">{{ status_message }}</div>

        {% if map_html %}<div class="map">{{ map_html|safe }}</div>{% endif %}

        {% if entries %}
        <div class="grid">
            {% for entry in entries %}
            {% set l = entry.listing %}
            <div class="card">
                {% if l.image_url %}<img src="{{ l.image_url }}" alt="{{ l.title }}">{% endif %}
                <div class="card-body">
                    <h2>{{ l.title }}</h2>
                    <div class="address">{{ l.address }}</div>
                    <div class="price">${{ "{:,.0f}".format(l.price) }}{% if l.type == 'rent' %}/mo{% endif %}</div>
                    <div class="meta">
                        <span class="tag tag-type">{{ l.type|capitalize }}</span>
                        {{ l.bedrooms }} bd · {{ l.bathrooms }} ba · {{ "{:,.0f}".format(l.area) }} sqft
                        {% if l.negotiable %}· negotiable{% endif %}
                    </div>
                    {% for feature in l.features|sort %}<span class="tag">{{ feature }}</span>{% endfor %}
                    {% if entry.distance_km is not none %}
                    <div class="distance">{{ "%.1f"|format(entry.distance_km) }} km away</div>
                    {% endif %}
                </div>
            </div>
            {% endfor %}
        </div>
        {% else %}
        <p class="no-results">No properties match your current search or filters.</p>
        {% endif %}
    </div>
</body>
</html>
"""


def build_map(display: DisplayList) -> Optional[folium.Map]:
    """Map with a marker per listing that has coordinates, plus the viewer."""
    points = [
        (entry, entry.listing.coordinates)
        for entry in display
        if entry.listing.coordinates is not None
    ]
    viewer = display.location.coordinates

    if not points and viewer is None:
        return None

    if viewer is not None:
        center = (viewer.lat, viewer.lng)
    else:
        center = (
            sum(c.lat for _, c in points) / len(points),
            sum(c.lng for _, c in points) / len(points),
        )

    fmap = folium.Map(location=center, zoom_start=MAP_DEFAULT_ZOOM)

    for entry, coords in points:
        listing = entry.listing
        popup = f"<b>{listing.title}</b><br>{listing.address}<br>${listing.price:,.0f}"
        if entry.distance_km is not None:
            popup += f"<br>{entry.distance_km:.1f} km away"
        folium.Marker(
            location=(coords.lat, coords.lng),
            popup=folium.Popup(popup, max_width=250),
            tooltip=listing.title,
            icon=folium.Icon(color="green" if listing.type == "sale" else "blue", icon="home"),
        ).add_to(fmap)

    if viewer is not None:
        folium.Marker(
            location=(viewer.lat, viewer.lng),
            tooltip="You are here",
            icon=folium.Icon(color="red", icon="user"),
        ).add_to(fmap)

    return fmap


def export_to_html(
    display: DisplayList,
    output_dir: Path | str,
    filename: str = None,
    search_term: str = "",
) -> Path:
    """Export the display list to an HTML page with an embedded map."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    filename = filename or HTML_FILENAME
    filepath = output_dir / filename

    console.print(f"[cyan]Generating HTML report for {len(display)} listings...[/]")

    fmap = build_map(display)

    template = Template(HTML_TEMPLATE, autoescape=True)
    html_content = template.render(
        entries=display.entries,
        total=display.total,
        search_term=search_term,
        status=display.location.status.value,
        status_message=display.status_message,
        map_html=fmap._repr_html_() if fmap is not None else None,
    )

    filepath.write_text(html_content, encoding="utf-8")
    console.print(f"[green]HTML report saved: {filepath}[/]")

    return filepath
