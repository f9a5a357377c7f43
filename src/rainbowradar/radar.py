"""CLI entry point for rainbow likelihood charts.

Edit the where/when/hour_offset variables at the top, then run:
    uv run python src/rainbowradar/radar.py

`when` is None for now, or a local "YYYY-MM-DD HH:MM" time at most two hours
ahead (the forecast window).
"""

import logging

from dotenv import load_dotenv

load_dotenv()

from rainbowradar.compute import run  # noqa: E402
from rainbowradar.models import QueryInput  # noqa: E402
from rainbowradar.renderers.static import save_static_chart  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

where = "Reykjavik"
when = None
hour_offset = 0

context, result = run(QueryInput(address=where, when=when), hour_offset=hour_offset)
print(
    f"{context.address_display}: {result.status.value}, {len(result.cells)} cells "
    f"(sun elevation {result.sun.elevation_deg:.1f}°)"
)
path = save_static_chart(context, result)
print(f"Saved: {path}")
