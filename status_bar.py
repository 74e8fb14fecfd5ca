import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, composing, active_cell,
                   range_size, total_rows, checked, undo_depth, redo_depth
    """
    text = ""
    now = time.time()
    if context.get('status_msg') and now < context.get('status_until', 0):
        text = f" {context['status_msg']}"
    else:
        mode = context.get('mode', 'normal')
        if context.get('composing'):
            label = 'IME'
        elif mode == 'editing':
            label = 'EDIT'
        else:
            label = 'GRID'
        row, field = context.get('active_cell', (0, ''))
        rows, cols = context.get('range_size', (1, 1))
        range_info = f" [{rows}x{cols}]" if rows * cols > 1 else ""
        total_rows = context.get('total_rows', 0)
        checked = context.get('checked', 0)
        checked_info = f" | {checked} checked" if checked else ""
        undo_info = f"undo {context.get('undo_depth', 0)}/redo {context.get('redo_depth', 0)}"
        text = f" {label} | row {row} {field}{range_info} | {total_rows} rows{checked_info} | {undo_info}"

    return text.ljust(width)[:width]
