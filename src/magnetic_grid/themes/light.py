"""Light theme."""

from magnetic_grid.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="none",
    grid_line_color="rgba(0, 0, 0, 0.12)",
    field_fill="#eef3fa",
    field_stroke="#8aa4c8",
    field_stroke_width=1.5,
    field_corner_radius=6.0,
    label_color="#222222",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=14.0,
    caption_color="#666666",
    caption_font_size=11.0,
    title_color="#111111",
    title_font_size=20.0,
    highlight_stroke="#d9822b",
)
