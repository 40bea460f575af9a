"""
Human-readable rendering of actions for notification channels.
"""
from ..core.actions import Action
from ..strategies.native_swaps.models import ALERT_ACTION_TYPE


def format_action(action: Action) -> str:
    """
    Render an action as plain text

    Native swap alerts get a summary of the window; other actions fall back
    to their raw representation.
    """
    if action.type != ALERT_ACTION_TYPE:
        return str(action)

    data = action.data
    movements = data.get("token_movements", [])
    lines = [
        f"{data.get('name', 'Alert')} [{data.get('alert_id')}]",
        f"Chain: {data.get('chain_id')}",
        f"Attacker: {data.get('attacker')}",
        f"Native received: {data.get('total_native_received')}",
        f"Swaps: {data.get('swap_count')}",
        f"Window: blocks {data.get('window_start_block')}-{data.get('window_end_block')} "
        f"({data.get('window_start_timestamp')}-{data.get('window_end_timestamp')})",
        f"Anomaly score: {data.get('anomaly_score')}",
        f"Token movements: {len(movements)}",
    ]
    for movement in movements:
        lines.append(
            f"  {movement.get('token')} {movement.get('amount')} ({movement.get('transaction_hash')})"
        )
    return "\n".join(lines)
