"""
Installation steps.

Each step takes a ``StepContext`` and returns a result dict::

    {"ok": True, "message": "..."}                    # done
    {"ok": True, "skipped": True, "message": "..."}   # precondition unmet
    {"ok": False, "message": "..."}                   # partial failure

A step may also raise ``StepFailure``.  Either way the orchestrator
logs it and moves on to the next step.
"""
