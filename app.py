"""
NiceGUI host for the mind-map board.

Renders the GraphModel as absolutely positioned node cards over an SVG edge
layer, forwards mouse events to the InteractionController through a
PointerEventBus, and confirms with the user before clearing the board.
"""

import logging
import random
import sys

from dotenv import load_dotenv
from nicegui import ui

load_dotenv()

from mindmap.config import get_log_level, get_palette_path, get_random_seed
from mindmap.edit import InteractionController, PointerEventBus, setup_board_handlers
from mindmap.edit.constants import NODE_SIZE
from mindmap.graph import SHAPE_CIRCLE
from mindmap.graph_model import GraphModel
from mindmap.palette import load_palette
from mindmap.scene import build_scene

logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


def confirm_dialog(message: str, on_confirm) -> ui.dialog:
    """Small yes/no dialog; on_confirm runs only on 'Yes'."""
    with ui.dialog() as dialog, ui.card().classes('p-6'):
        ui.label(message).classes('text-lg font-bold')
        with ui.row().classes('w-full justify-end gap-2 mt-4'):
            ui.button('Cancel', on_click=dialog.close).props('flat')

            def do_confirm():
                dialog.close()
                on_confirm()

            ui.button('Yes', on_click=do_confirm).props('color=negative')
    dialog.open()
    return dialog


@ui.page('/')
def main_page():
    ui.query('body').style('margin: 0; padding: 0; overflow: hidden;')

    palette = load_palette(get_palette_path())
    model = GraphModel(palette=palette, rng=random.Random(get_random_seed()))
    controller = InteractionController(model)
    bus = PointerEventBus()
    state = {'container_origin': None}

    # --- Header ---
    with ui.row().classes('w-full items-center justify-between p-4 border-b'):
        with ui.row().classes('items-center gap-3'):
            ui.icon('hub', size='md').classes('text-primary')
            ui.label('Interactive Knowledge Map').classes('font-bold text-lg')
        with ui.row().classes('items-center gap-4'):
            ui.button('Recenter', on_click=lambda: controller.recenter()).props('rounded outline size=sm')
            ui.button(
                'Reset',
                on_click=lambda: confirm_dialog('Clear board?', controller.reset),
            ).props('rounded outline size=sm color=negative')

    board = ui.element('div').classes('relative w-full overflow-hidden select-none').style('height: calc(100vh - 80px);')

    @ui.refreshable
    def render_board():
        scene = build_scene(model, controller.state)

        # Edge layer
        with ui.element('svg').classes('absolute inset-0 w-full h-full').style('pointer-events: none; z-index: 0;'):
            for edge in scene['edges']:
                line = ui.element('line').props(
                    f'x1={edge["x1"]} y1={edge["y1"]} x2={edge["x2"]} y2={edge["y2"]} '
                    f'stroke="{edge["stroke"]}" stroke-width={edge["width"]} '
                    f'stroke-dasharray="{edge["dash_array"]}" opacity={edge["opacity"]}'
                ).style('pointer-events: stroke; cursor: pointer;')
                line.on('click', lambda _, i=edge['index']: controller.toggle_edge_style(i))

        # Node layer
        for node in scene['nodes']:
            render_node(node)

    def render_node(node):
        nid = node['id']
        rounded = 'rounded-full' if node['shape'] == SHAPE_CIRCLE else 'rounded-2xl'
        border = 'var(--q-primary)' if node['is_connect_source'] else node['color']
        cursor = 'cursor-grabbing' if node['is_dragging'] else 'cursor-grab'

        with ui.element('div').classes(f'absolute group {cursor}').style(
            f'left: {node["left"]}px; top: {node["top"]}px; width: {NODE_SIZE}px; z-index: 10;'
        ):
            with ui.column().classes(f'items-center justify-center gap-0 p-2 border-2 shadow-lg {rounded}').style(
                f'width: {NODE_SIZE}px; height: {NODE_SIZE}px; border-color: {border};'
            ):
                ui.label(node['glyph']).classes('text-2xl')
                if node['is_editing']:
                    ui.input(
                        value=node['label'],
                        on_change=lambda e, n=nid: handlers['handle_label_input'](n, e.value),
                    ).props('dense borderless autofocus input-class="text-center text-[10px]"') \
                        .on('mousedown.stop', lambda _: None) \
                        .on('blur', handlers['handle_label_commit']) \
                        .on('keydown.enter', handlers['handle_label_commit'])
                else:
                    ui.label(node['label']).classes('text-[10px] font-black uppercase text-center') \
                        .on('dblclick', lambda _, n=nid: controller.start_edit_label(n))

            # Node toolbar (visible on hover)
            with ui.row().classes('absolute -top-10 left-1/2 -translate-x-1/2 gap-1 opacity-0 group-hover:opacity-100'):
                ui.button(icon='add', on_click=lambda _, n=nid: controller.spawn_child(n)).props('round dense size=xs color=positive')
                ui.button(icon='link', on_click=lambda _, n=nid: controller.start_connect(n)).props('round dense size=xs color=indigo')
                ui.button(icon='category', on_click=lambda _, n=nid: controller.toggle_shape(n)).props('round dense size=xs color=grey')
                ui.button(icon='delete', on_click=lambda _, n=nid: controller.remove_node(n)).props('round dense size=xs color=negative')

            # Color & glyph strips
            with ui.column().classes('absolute -bottom-16 left-1/2 -translate-x-1/2 items-center gap-1 opacity-0 group-hover:opacity-100'):
                with ui.row().classes('gap-0.5'):
                    for color in palette.quick_colors:
                        ui.element('div').classes('w-4 h-4 rounded-full cursor-pointer').style(f'background-color: {color};') \
                            .on('click', lambda _, n=nid, c=color: controller.set_color(n, c))
                with ui.row().classes('gap-0.5'):
                    for glyph in palette.quick_glyphs:
                        ui.label(glyph).classes('text-[10px] cursor-pointer') \
                            .on('click', lambda _, n=nid, g=glyph: controller.set_glyph(n, g))

    def refresh_board():
        render_board.refresh()

    handlers = setup_board_handlers(state, controller, bus, refresh_board)

    async def update_origin():
        rect = await ui.run_javascript(
            f'return getHtmlElement({board.id}).getBoundingClientRect().toJSON();'
        )
        handlers['handle_container_rect'](rect)

    async def handle_mouse_up(event):
        handlers['handle_mouse_up'](event)
        # The board may have moved with scrolling or resizing
        await update_origin()

    board.on('mousedown', handlers['handle_mouse_down'], ['clientX', 'clientY'])
    board.on('mousemove', handlers['handle_mouse_move'], ['clientX', 'clientY'], throttle=0.02)
    board.on('mouseup', handle_mouse_up, ['clientX', 'clientY'])
    ui.keyboard(on_key=handlers['handle_keyboard'])

    with board:
        render_board()

    ui.timer(0.2, update_origin, once=True)


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='Mind Map',
        port=8081,
        reload=not getattr(sys, 'frozen', False),
    )
