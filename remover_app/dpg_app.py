"""Desktop watermark remover built on Dear PyGui."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import UnidentifiedImageError

import dearpygui.dearpygui as dpg

from retouch_brush import (
    RADIUS_RANGE,
    OperatorKind,
    RenderBox,
    RetouchEngine,
    download_name,
    fit_display_size,
    load_image_rgba_u8,
    save_image_rgba_u8,
)

logger = logging.getLogger(__name__)

STATE_PATH = Path.home() / ".retouch_brush_state.json"

WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 760
CONTROLS_WIDTH = 320
MARGIN = 10
CANVAS_WINDOW_WIDTH = WINDOW_WIDTH - CONTROLS_WIDTH - MARGIN * 3
CANVAS_WINDOW_HEIGHT = WINDOW_HEIGHT - MARGIN * 2

OPERATOR_LABELS = {
    OperatorKind.REPAIR: "Repair (fill from surroundings)",
    OperatorKind.BLUR: "Blur (soften the area)",
    OperatorKind.PIXELATE: "Pixelate (mosaic)",
}

STATE = {
    "engine": RetouchEngine(),
    "path": None,
    "last_dir": None,
    "canvas_tex": None,
    "tex_counter": 0,
    "display_w": 1,
    "display_h": 1,
}


def load_state() -> None:
    if not STATE_PATH.exists():
        return
    try:
        data = json.loads(STATE_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable state file %s: %s", STATE_PATH, exc)
        return
    last_dir = data.get("last_dir")
    if isinstance(last_dir, str):
        STATE["last_dir"] = last_dir


def save_state() -> None:
    payload = {"last_dir": STATE.get("last_dir")}
    try:
        STATE_PATH.write_text(json.dumps(payload), encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write state file %s: %s", STATE_PATH, exc)


def set_status(message: str) -> None:
    dpg.set_value("status_text", message)


def u8_to_texture(img_u8: np.ndarray) -> Tuple[int, int, np.ndarray]:
    height, width = img_u8.shape[:2]
    rgba = img_u8.astype(np.float32) / 255.0
    return width, height, rgba.ravel()


def _new_texture_tag(prefix: str) -> str:
    STATE["tex_counter"] += 1
    return f"{prefix}_{STATE['tex_counter']}"


def rebuild_texture(width: int, height: int) -> None:
    blank = np.zeros((height, width, 4), dtype=np.float32)

    if not dpg.does_item_exist("texture_registry"):
        dpg.add_texture_registry(show=False, tag="texture_registry")

    old_tag = STATE.get("canvas_tex")
    new_tag = _new_texture_tag("canvas_texture")
    dpg.add_dynamic_texture(
        width,
        height,
        blank.ravel(),
        tag=new_tag,
        parent="texture_registry",
    )
    STATE["canvas_tex"] = new_tag

    if dpg.does_item_exist("canvas_image"):
        dpg.configure_item(
            "canvas_image",
            texture_tag=new_tag,
            width=STATE["display_w"],
            height=STATE["display_h"],
        )

    if old_tag and dpg.does_item_exist(old_tag):
        dpg.delete_item(old_tag)


def refresh_canvas() -> None:
    engine: RetouchEngine = STATE["engine"]
    if not engine.is_loaded:
        return
    _, _, data = u8_to_texture(engine.export())
    dpg.set_value(STATE["canvas_tex"], data)
    dpg.configure_item("undo_button", enabled=engine.can_undo)


def render_box() -> RenderBox:
    left, top = dpg.get_item_rect_min("canvas_image")
    width, height = dpg.get_item_rect_size("canvas_image")
    return RenderBox(float(left), float(top), float(width), float(height))


def mouse_pos() -> Tuple[float, float]:
    x, y = dpg.get_mouse_pos(local=False)
    return float(x), float(y)


def load_path(path: str) -> None:
    try:
        pixels = load_image_rgba_u8(path)
    except UnidentifiedImageError:
        set_status("Please choose an image file")
        return
    except (OSError, RuntimeError) as exc:
        set_status(f"Open failed: {exc}")
        return

    STATE["last_dir"] = str(Path(path).parent)
    save_state()
    STATE["path"] = path

    height, width = pixels.shape[:2]
    engine: RetouchEngine = STATE["engine"]
    engine.load(pixels, width, height)

    STATE["display_w"], STATE["display_h"] = fit_display_size(
        width, height, CANVAS_WINDOW_WIDTH - MARGIN * 2)
    rebuild_texture(width, height)
    dpg.configure_item("canvas_image", show=True)
    dpg.set_value("operator_radio", OPERATOR_LABELS[engine.brush.operator])
    dpg.set_value("radius_slider", engine.brush.radius)
    dpg.set_value("path_text", f"Path: {path}")
    dpg.configure_item("download_button", enabled=True)
    refresh_canvas()
    set_status(f"Loaded {width}x{height}")


def on_open_file(sender, app_data, user_data) -> None:
    selection = app_data.get("selections")
    if not selection:
        return
    path = next(iter(selection.values()))
    load_path(path)


def on_open_explorer(sender, app_data, user_data) -> None:
    try:
        import tkinter as tk
        from tkinter import filedialog
    except ImportError as exc:
        set_status(f"Explorer dialog failed: {exc}")
        return

    root = tk.Tk()
    root.withdraw()
    root.wm_attributes("-topmost", 1)
    initial_dir = STATE.get("last_dir") or str(Path.home())
    path = filedialog.askopenfilename(
        title="Select image",
        initialdir=initial_dir,
        filetypes=[
            ("Image files", "*.jpg *.jpeg *.png *.webp *.tif *.tiff *.heic"),
            ("All files", "*.*"),
        ],
    )
    root.destroy()
    if not path:
        return
    load_path(path)


def on_viewport_drop(sender, app_data) -> None:
    if not app_data:
        return
    path = app_data[0]
    if not Path(path).is_file():
        return
    load_path(path)


def on_operator_change(sender, app_data, user_data) -> None:
    for kind, label in OPERATOR_LABELS.items():
        if label == app_data:
            STATE["engine"].set_operator(kind)
            return


def on_radius_change(sender, app_data, user_data) -> None:
    radius = STATE["engine"].set_radius(app_data)
    if radius != app_data:
        dpg.set_value("radius_slider", radius)


def on_mouse_click(sender, app_data) -> None:
    engine: RetouchEngine = STATE["engine"]
    if not engine.is_loaded or not dpg.is_item_hovered("canvas_image"):
        return
    if engine.pointer_down(mouse_pos(), render_box()) is not None:
        refresh_canvas()


def on_mouse_move(sender, app_data) -> None:
    engine: RetouchEngine = STATE["engine"]
    if not engine.stroke_active:
        return
    if not dpg.is_item_hovered("canvas_image"):
        engine.pointer_leave()
        refresh_canvas()
        return
    if engine.pointer_move(mouse_pos(), render_box()) is not None:
        refresh_canvas()


def on_mouse_release(sender, app_data) -> None:
    engine: RetouchEngine = STATE["engine"]
    if engine.pointer_up():
        refresh_canvas()


def on_undo(sender, app_data, user_data) -> None:
    engine: RetouchEngine = STATE["engine"]
    if engine.is_loaded and engine.undo():
        refresh_canvas()


def on_download(sender, app_data, user_data) -> None:
    engine: RetouchEngine = STATE["engine"]
    if not engine.is_loaded:
        return
    target: Optional[str]
    try:
        import tkinter as tk
        from tkinter import filedialog
    except ImportError:
        target = str(Path(STATE.get("last_dir") or Path.home()) / download_name())
    else:
        root = tk.Tk()
        root.withdraw()
        root.wm_attributes("-topmost", 1)
        target = filedialog.asksaveasfilename(
            title="Save image",
            initialdir=STATE.get("last_dir") or str(Path.home()),
            initialfile=download_name(),
            defaultextension=".png",
            filetypes=[("PNG image", "*.png")],
        )
        root.destroy()
    if not target:
        return
    try:
        save_image_rgba_u8(target, engine.export())
    except (OSError, ValueError) as exc:
        set_status(f"Save failed: {exc}")
    else:
        set_status(f"Saved {target}")


def build_ui() -> None:
    dpg.create_context()
    dpg.create_viewport(
        title="Watermark Remover", width=WINDOW_WIDTH, height=WINDOW_HEIGHT)

    if not dpg.does_item_exist("texture_registry"):
        dpg.add_texture_registry(show=False, tag="texture_registry")
    rebuild_texture(1, 1)

    default_path = STATE.get("last_dir") or str(Path.home())

    with dpg.file_dialog(
        directory_selector=False,
        show=False,
        callback=on_open_file,
        tag="file_dialog",
        file_count=1,
        default_path=default_path,
        width=640,
        height=420,
    ):
        for ext in (".jpg", ".jpeg", ".png", ".webp", ".tif", ".tiff", ".heic"):
            dpg.add_file_extension(ext)

    min_radius, max_radius = RADIUS_RANGE
    with dpg.window(
        label="Tools",
        width=CONTROLS_WIDTH,
        height=WINDOW_HEIGHT - MARGIN * 2,
        pos=(MARGIN, MARGIN),
        tag="controls_window",
    ):
        dpg.add_button(label="Open Image",
                       callback=lambda: dpg.show_item("file_dialog"))
        dpg.add_button(label="Open via Explorer", callback=on_open_explorer)
        dpg.add_text("Path: ", tag="path_text", wrap=CONTROLS_WIDTH - MARGIN * 2)
        dpg.add_spacer(height=8)
        dpg.add_text("Tool")
        dpg.add_radio_button(
            items=list(OPERATOR_LABELS.values()),
            default_value=OPERATOR_LABELS[OperatorKind.REPAIR],
            tag="operator_radio",
            callback=on_operator_change,
        )
        dpg.add_spacer(height=8)
        dpg.add_slider_int(
            label="Brush size",
            min_value=min_radius,
            max_value=max_radius,
            default_value=STATE["engine"].brush.radius,
            tag="radius_slider",
            callback=on_radius_change,
        )
        dpg.add_spacer(height=8)
        dpg.add_button(label="Undo", tag="undo_button",
                       callback=on_undo, enabled=False)
        dpg.add_button(label="Download PNG", tag="download_button",
                       callback=on_download, enabled=False)
        dpg.add_spacer(height=8)
        dpg.add_text("", tag="status_text", wrap=CONTROLS_WIDTH - MARGIN * 2)

    with dpg.window(
        label="Canvas",
        width=CANVAS_WINDOW_WIDTH,
        height=CANVAS_WINDOW_HEIGHT,
        pos=(CONTROLS_WIDTH + MARGIN * 2, MARGIN),
        tag="canvas_window",
        no_scroll_with_mouse=True,
    ):
        dpg.add_image(STATE["canvas_tex"], tag="canvas_image", show=False)

    with dpg.handler_registry():
        dpg.add_mouse_click_handler(button=dpg.mvMouseButton_Left, callback=on_mouse_click)
        dpg.add_mouse_move_handler(callback=on_mouse_move)
        dpg.add_mouse_release_handler(button=dpg.mvMouseButton_Left, callback=on_mouse_release)

    if hasattr(dpg, "set_viewport_drop_callback"):
        dpg.set_viewport_drop_callback(on_viewport_drop)

    dpg.setup_dearpygui()
    dpg.show_viewport()
    dpg.start_dearpygui()
    dpg.destroy_context()


def main() -> None:
    logging.basicConfig(level=logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    load_state()
    build_ui()


if __name__ == "__main__":
    main()
