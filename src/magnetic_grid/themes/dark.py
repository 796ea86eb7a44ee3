"""Dark grey theme."""

from magnetic_grid.render.style import Theme

DARK_THEME = Theme(
    name="dark",
    background_color="#2b2b2b",
    grid_line_color="rgba(255, 255, 255, 0.15)",
    field_fill="#3c4a5c",
    field_stroke="#6d8bb3",
    field_stroke_width=1.5,
    field_corner_radius=6.0,
    label_color="#ffffff",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=14.0,
    caption_color="#aaaaaa",
    caption_font_size=11.0,
    title_color="#ffffff",
    title_font_size=20.0,
    highlight_fill="#4d5f2f",
)
