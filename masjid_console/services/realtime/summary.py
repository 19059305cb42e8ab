# masjid_console/services/realtime/summary.py

def summarize_ack(result, timeout_seconds):
    """
    Turns an AckResult into the status line shown to the admin.

    Returns:
        dict: {'message': str, 'level': 'success' | 'warning'}
    """
    count = result.response_count
    if result.success and not result.timed_out:
        return {
            'message': f"Operation successful! and {count} client(s) refreshed.",
            'level': 'success',
        }
    if result.success:
        return {
            'message': f"Operation successful! {count} client(s) responded before timeout.",
            'level': 'success',
        }
    return {
        'message': f"Operation successful but no clients responded within {timeout_seconds:g} seconds.",
        'level': 'warning',
    }
