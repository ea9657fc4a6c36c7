"""Path processing — inbound and outbound path rewriting.

Processors are plain objects with ``process_inbound`` and/or
``process_outbound``; the manager runs them in priority order.
"""
