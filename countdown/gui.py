import logging
import time
from tkinter import Canvas, BOTH

import ttkbootstrap as tb

from countdown.controller import CountdownController, TimerState
from countdown.timer import TkScheduler
from countdown import presentation

FRAME_MS = 16


class TimerScreen:
    """
    Verbindet Controller und Darstellung, ohne selbst Widgets zu besitzen:
    übernimmt neue Zustände, führt Füllung und Schriftgröße per after()
    nach und ruft redraw(screen) für jeden Frame auf.
    """

    def __init__(self, root, controller: CountdownController, redraw, clock=time.monotonic):
        self.root = root
        self.controller = controller
        self.redraw = redraw
        self.clock = clock
        self.closed = False

        self.state = controller.state
        self.fill = presentation.Tween(0.0)
        self.font = presentation.Tween(presentation.value_font_size(self.state))
        self.fill_anim = None
        self._anim_job = None

        self._unsubscribe = controller.subscribe(self.on_state)
        self.on_state(self.state)

    @property
    def fill_value(self) -> float:
        return self.fill.value(self.clock())

    @property
    def font_size(self) -> int:
        return round(self.font.value(self.clock()))

    def on_state(self, state: TimerState):
        """Übernimmt einen neuen Zustand und startet ggf. Animationen."""
        now = self.clock()
        anim = presentation.fill_animation(state)
        # gleiche Animation (z.B. weitere Ticks): laufen lassen
        if anim != self.fill_anim:
            origin = None
            if anim.easing == presentation.LINEAR:
                # Ablauf startet synchron zur Restzeit
                origin = presentation.fill_fraction(state)
            self.fill.retarget(anim.target, anim.duration_ms, anim.easing, now, origin)
            self.fill_anim = anim

        size = presentation.value_font_size(state)
        if size != self.font.target:
            self.font.retarget(size, presentation.FONT_ANIM_MS, presentation.EASE_OUT, now)

        self.state = state
        self._schedule_frame()
        self.redraw(self)

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._unsubscribe()
        self.controller.close()
        if self._anim_job is not None:
            self.root.after_cancel(self._anim_job)
            self._anim_job = None

    def _schedule_frame(self):
        if self._anim_job is None and not self.closed:
            self._anim_job = self.root.after(FRAME_MS, self._animate)

    def _animate(self):
        self._anim_job = None
        now = self.clock()
        self.redraw(self)
        if not (self.fill.done(now) and self.font.done(now)):
            self._schedule_frame()


# GUI-Klasse für den Countdown
class TimerApp:
    def __init__(self, initial_seconds: int = CountdownController.INITIAL_SECONDS,
                 theme: str = "darkly", geometry: str = "420x720", scheduler=None):
        self.logger = logging.getLogger("countdown.gui")

        # GUI
        self.style = tb.Style(theme=theme)
        self.root = self.style.master
        self.root.title("Countdown")
        self.root.geometry(geometry)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        # Controller & Scheduler
        self.controller = CountdownController(scheduler or TkScheduler(self.root), initial_seconds)

        # Fläche für Füllung und Ziffer
        colors = self.style.colors
        self.canvas = Canvas(self.root, bg=colors.bg, highlightthickness=0)
        self.canvas.pack(fill=BOTH, expand=1)
        self.fill_rect = self.canvas.create_rectangle(0, 0, 0, 0, fill=colors.primary, width=0)
        self.value_text = self.canvas.create_text(0, 0, fill=colors.fg, justify="center")

        # Buttons
        self.decrease_btn = tb.Button(self.root, text="−", bootstyle="secondary", width=3,
                                      command=lambda: self.controller.decrease(CountdownController.CONTROL_STEP))
        self.increase_btn = tb.Button(self.root, text="+", bootstyle="secondary", width=3,
                                      command=lambda: self.controller.increase(CountdownController.CONTROL_STEP))
        self.start_btn = tb.Button(self.root, text="▶", bootstyle="primary", width=4,
                                   command=self.controller.start)
        self.cancel_btn = tb.Button(self.root, text="CANCEL", bootstyle="primary-outline",
                                    command=self.controller.cancel)

        self.screen = TimerScreen(self.root, self.controller, self._render)
        self.canvas.bind("<Configure>", lambda e: self._render(self.screen))

    def run(self):
        self.root.mainloop()

    def on_close(self):
        self.logger.info("Fenster geschlossen.")
        self.screen.close()
        self.root.destroy()

    def _render(self, screen: TimerScreen):
        state = screen.state
        self._place_controls(state)

        w = self.canvas.winfo_width()
        h = self.canvas.winfo_height()
        self.canvas.coords(self.fill_rect, 0, h * (1 - screen.fill_value), w, h)
        self.canvas.coords(self.value_text, w / 2, h / 2)
        # Schriftgrößen für das Desktop-Fenster halbiert
        self.canvas.itemconfigure(
            self.value_text,
            text=presentation.displayed_value(state),
            font=("Helvetica", screen.font_size // 2, "bold"),
        )

    def _place_controls(self, state: TimerState):
        if presentation.decrease_visible(state):
            self.decrease_btn.place(relx=0.0, rely=0.5, x=16, anchor="w")
        else:
            self.decrease_btn.place_forget()
        if presentation.increase_visible(state):
            self.increase_btn.place(relx=1.0, rely=0.5, x=-16, anchor="e")
        else:
            self.increase_btn.place_forget()

        bar = presentation.bottom_bar(state)
        self.start_btn.place_forget()
        self.cancel_btn.place_forget()
        if bar == "start":
            self.start_btn.place(relx=0.5, rely=1.0, y=-48, anchor="s")
        elif bar == "cancel":
            self.cancel_btn.place(relx=0.5, rely=1.0, y=-48, anchor="s")
