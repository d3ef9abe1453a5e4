from __future__ import annotations

import logging
import threading
import tkinter as tk
from typing import Any, Callable

logger = logging.getLogger(__name__)


class TkDispatcher:
    """Run blocking work on a daemon thread, deliver the outcome on the Tk thread."""

    def __init__(self, master: tk.Misc):
        self.master = master

    def submit(
        self,
        work: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[BaseException], None],
    ) -> None:
        def worker() -> None:
            err: Exception | None = None
            result: Any = None
            try:
                result = work()
            except Exception as e:
                err = e
                logger.debug("Background task failed", exc_info=True)

            def finish_on_ui_thread() -> None:
                if err is not None:
                    on_failure(err)
                else:
                    on_success(result)

            self.master.after(0, finish_on_ui_thread)

        threading.Thread(target=worker, daemon=True).start()
