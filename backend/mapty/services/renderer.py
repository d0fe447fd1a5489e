"""HTML fragments for workout list items and marker popups, plus spoken workout details."""

from __future__ import annotations

from html import escape

from mapty.schemas.workout import Cycling, Running, Workout

ICONS = {
    "running": "🏃‍♂️",
    "cycling": "🚴‍♀️",
}


def format_number(value: float) -> str:
    """Whole numbers without a trailing .0, like JavaScript string conversion."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def popup_content(workout: Workout) -> str:
    return f"{ICONS[workout.type]} {workout.label}"


def _detail(icon: str, value: str, unit: str) -> str:
    return (
        '<div class="workout__details">'
        f'<span class="workout__icon">{icon}</span>'
        f'<span class="workout__value">{escape(value)}</span>'
        f'<span class="workout__unit">{unit}</span>'
        "</div>"
    )


def render_workout(workout: Workout) -> str:
    """One <li> for the workout list, keyed by data-id."""
    parts = [
        f'<li class="workout workout--{workout.type}" data-id="{escape(workout.id)}">',
        f'<h2 class="workout__title">{escape(workout.label)}</h2>',
        _detail(ICONS[workout.type], format_number(workout.distance_km), "km"),
        _detail("⏱", format_number(workout.duration_min), "min"),
    ]
    if isinstance(workout, Running):
        parts.append(_detail("⚡️", f"{workout.pace_min_per_km:.1f}", "min/km"))
        parts.append(_detail("🦶🏼", format_number(workout.cadence_spm), "spm"))
    elif isinstance(workout, Cycling):
        parts.append(_detail("⚡️", f"{workout.speed_km_per_h:.1f}", "km/h"))
        parts.append(_detail("⛰", format_number(workout.elevation_gain_m), "m"))
    parts.append(
        '<div class="workout__control">'
        '<button class="workout__btn workout__btn--clear">🗑 Clear</button>'
        '<button class="workout__btn workout__btn--edit">📝 Edit</button>'
        "</div>"
    )
    parts.append("</li>")
    return "".join(parts)


def spoken_details(workout: Workout) -> list[str]:
    sentences = [
        workout.label,
        f"distance {format_number(workout.distance_km)} kilometers",
        f"duration {format_number(workout.duration_min)} minutes",
    ]
    if isinstance(workout, Running):
        sentences.append(f"pace {workout.pace_min_per_km:.1f} minutes per kilometer")
        sentences.append(f"cadence {format_number(workout.cadence_spm)} steps per minute")
    elif isinstance(workout, Cycling):
        sentences.append(f"speed {workout.speed_km_per_h:.1f} kilometers per hour")
        sentences.append(f"elevation gain {format_number(workout.elevation_gain_m)} meters")
    return sentences


def render_page(list_items: list[str], form_hidden: bool = True) -> str:
    """Page shell: sidebar with form and list, Leaflet map. All state comes from /api/v1/view."""
    items = "".join(list_items)
    hidden = " hidden" if form_hidden else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>mapty // Map your workouts</title>
  <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css" />
  <script defer src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
  <style>
    body {{ display: flex; margin: 0; height: 100vh; font-family: system-ui, sans-serif; }}
    .sidebar {{ flex-basis: 40rem; padding: 1rem; overflow-y: auto; background: #2d3439; color: #ececec; }}
    #map {{ flex: 1; }}
    .hidden, .form__row--hidden {{ display: none; }}
    .workouts {{ list-style: none; padding: 0; }}
    .workout {{ background: #42484d; border-radius: 5px; padding: 0.8rem; margin-bottom: 0.8rem; }}
    .workout--running {{ border-left: 5px solid #00c46a; }}
    .workout--cycling {{ border-left: 5px solid #ffb545; }}
    .workout__details {{ display: inline-block; margin-right: 1rem; }}
    .form__input--error {{ outline: 2px solid #e74c3c; }}
    .form__input--success {{ outline: 2px solid #00c46a; }}
    .form__hint {{ visibility: hidden; color: #e74c3c; font-size: 0.8rem; }}
  </style>
</head>
<body>
  <div class="sidebar">
    <div class="sidebar__controls">
      <button class="sidebar__btn sidebar__btn--sortDistance">Sort by distance</button>
      <button class="sidebar__btn sidebar__btn--sortTime">Sort by time</button>
      <button class="sidebar__btn sidebar__btn--clearAll">Clear all</button>
    </div>
    <ul class="workouts">
      <form class="form{hidden}">
        <div class="form__row"><label>Type</label>
          <select class="form__input form__input--type">
            <option value="running">Running</option><option value="cycling">Cycling</option>
          </select></div>
        <div class="form__row"><label>Distance</label><input class="form__input form__input--distance" data-field="distance" placeholder="km" /><span class="form__hint">Positive number</span></div>
        <div class="form__row"><label>Duration</label><input class="form__input form__input--duration" data-field="duration" placeholder="min" /><span class="form__hint">Positive number</span></div>
        <div class="form__row"><label>Cadence</label><input class="form__input form__input--cadence" data-field="cadence" placeholder="step/min" /><span class="form__hint">Positive number</span></div>
        <div class="form__row form__row--hidden"><label>Elev Gain</label><input class="form__input form__input--elevation" data-field="elevation" placeholder="meters" /><span class="form__hint">Number</span></div>
        <button class="form__btn">OK</button>
        <button class="form__btn form__btn--cancel" type="button">Cancel</button>
      </form>
      {items}
    </ul>
  </div>
  <div id="map"></div>
  <script>
    const api = (path, method = "GET", body) =>
      fetch("/api/v1" + path, {{ method, headers: {{ "Content-Type": "application/json" }}, body: body && JSON.stringify(body) }});
    const form = document.querySelector(".form");
    let map, lastViewport, markers = [];

    function draw(view) {{
      const m = view.map;
      if (m.error) {{ document.getElementById("map").innerText = m.error; return; }}
      if (m.ready && !map) {{
        map = L.map("map").setView(m.viewport.center, m.viewport.zoom);
        L.tileLayer(m.tile_layer.url, {{ attribution: m.tile_layer.attribution }}).addTo(map);
        map.on("click", (e) => act("/map/click", "POST", {{ latitude: e.latlng.lat, longitude: e.latlng.lng }}));
      }} else if (map && m.viewport && JSON.stringify(m.viewport) !== lastViewport) {{
        map.setView(m.viewport.center, m.viewport.zoom, {{ animate: m.viewport.animate, pan: {{ duration: m.viewport.pan_duration || 0.25 }} }});
      }}
      if (m.viewport) lastViewport = JSON.stringify(m.viewport);
      if (map) {{
        markers.forEach((layer) => layer.remove());
        markers = m.markers.map((mk) => L.marker(mk.coordinates).addTo(map)
          .bindPopup(L.popup({{ maxWidth: mk.popup.max_width, minWidth: mk.popup.min_width, autoClose: mk.popup.auto_close,
            closeOnClick: mk.popup.close_on_click, className: mk.popup.class_name }}))
          .setPopupContent(mk.popup.content).openPopup());
      }}
      form.classList.toggle("hidden", view.form.hidden);
      document.querySelector(".form__input--type").value = view.form.type;
      for (const [name, f] of Object.entries(view.form.fields)) {{
        const input = form.querySelector(`[data-field="${{name}}"]`);
        input.value = f.value;
        input.className = `form__input form__input--${{name}} ` + f.classes.join(" ");
        input.nextElementSibling.style.visibility = f.hint_visible ? "visible" : "hidden";
        input.closest(".form__row").classList.toggle("form__row--hidden", f.row_hidden);
      }}
      document.querySelectorAll(".workout").forEach((el) => el.remove());
      form.insertAdjacentHTML("afterend", view.list_items.join(""));
    }}

    async function refresh() {{
      draw(await (await api("/view")).json());
      speechSynthesis.cancel();
      for (const u of await (await api("/speech")).json()) {{
        const s = new SpeechSynthesisUtterance(u.text);
        s.lang = u.lang; s.rate = u.rate;
        speechSynthesis.speak(s);
      }}
    }}
    const act = async (path, method, body) => {{ await api(path, method, body); await refresh(); }};

    window.addEventListener("load", () => {{
      navigator.geolocation.getCurrentPosition(
        (p) => act("/map/position", "POST", {{ latitude: p.coords.latitude, longitude: p.coords.longitude }}),
        () => act("/map/position/error", "POST"));
    }});
    form.addEventListener("submit", (e) => {{
      e.preventDefault();
      const body = {{ type: form.querySelector(".form__input--type").value }};
      form.querySelectorAll("[data-field]").forEach((i) => (body[i.dataset.field] = i.value));
      act("/workouts", "POST", body);
    }});
    form.querySelector(".form__input--type").addEventListener("change", (e) => act("/form/type", "POST", {{ type: e.target.value }}));
    form.querySelector(".form__btn--cancel").addEventListener("click", () => act("/form/cancel", "POST"));
    document.querySelector(".workouts").addEventListener("click", (e) => {{
      const el = e.target.closest(".workout");
      if (!el) return;
      if (e.target.classList.contains("workout__btn--clear")) act(`/workouts/${{el.dataset.id}}`, "DELETE");
      else if (e.target.classList.contains("workout__btn--edit")) act(`/workouts/${{el.dataset.id}}/edit`, "POST");
      else act(`/workouts/${{el.dataset.id}}/focus`, "POST");
    }});
    document.querySelector(".sidebar__btn--sortDistance").addEventListener("click", () => act("/workouts/sort/distance", "POST"));
    document.querySelector(".sidebar__btn--sortTime").addEventListener("click", () => act("/workouts/sort/time", "POST"));
    document.querySelector(".sidebar__btn--clearAll").addEventListener("click", () => act("/workouts", "DELETE"));
  </script>
</body>
</html>"""
