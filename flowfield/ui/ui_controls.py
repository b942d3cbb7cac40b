"""
UI controls module for FlowField.

Minimal UI wiring matplotlib widgets and canvas events to scheduler commands:
stop, reload, shuffle pattern and pause buttons, keyboard shortcuts, and the
window resize event.
"""

from matplotlib.widgets import Button

from .. import config

# Keyboard shortcuts
STOP_HOTKEY = 's'
RELOAD_HOTKEY = 'r'
SHUFFLE_HOTKEY = 'f'
PAUSE_HOTKEY = 'p'


class UIController:
    """Main UI controller for managing interactive controls."""

    def __init__(self, fig, scheduler):
        """
        Initialize UI controller.

        Args:
            fig: Matplotlib figure
            scheduler: Scheduler receiving the commands
        """
        self.fig = fig
        self.scheduler = scheduler
        self.buttons = {}
        self.connected_handlers = []

        self.setup_ui_controls()
        self.connect_events()

    def setup_ui_controls(self):
        """Place a row of buttons under the map."""
        labels = [
            ('stop', 'Stop', self._on_stop_clicked),
            ('reload', 'Reload', self._on_reload_clicked),
            ('shuffle', 'Shuffle', self._on_shuffle_clicked),
            ('pause', 'Pause', self._on_pause_clicked),
        ]
        for index, (name, label, callback) in enumerate(labels):
            btn_ax = self.fig.add_axes([0.02 + index * 0.16, 0.015, 0.14, 0.05])
            button = Button(btn_ax, label)
            button.on_clicked(callback)
            self.buttons[name] = button

    def connect_events(self):
        """Connect key and resize handlers."""
        self.disconnect_events()
        key_cid = self.fig.canvas.mpl_connect('key_press_event', self.handle_key_press)
        resize_cid = self.fig.canvas.mpl_connect('resize_event', self.handle_resize)
        self.connected_handlers = [key_cid, resize_cid]

    def disconnect_events(self):
        for cid in self.connected_handlers:
            self.fig.canvas.mpl_disconnect(cid)
        self.connected_handlers = []

    # Commands

    def stop(self):
        self.scheduler.stop()

    def reload(self):
        self.scheduler.reset(restart=True)

    def shuffle(self):
        pattern = self.scheduler.shuffle_pattern()
        manager = self.fig.canvas.manager
        if manager is not None:
            manager.set_window_title(f"{config.WINDOW_TITLE} - {pattern.value}")

    def toggle_pause(self):
        paused = self.scheduler.toggle_pause()
        self.buttons['pause'].label.set_text('Resume' if paused else 'Pause')
        self.fig.canvas.draw_idle()

    # Event handlers

    def _on_stop_clicked(self, event):
        self.stop()

    def _on_reload_clicked(self, event):
        self.reload()

    def _on_shuffle_clicked(self, event):
        self.shuffle()

    def _on_pause_clicked(self, event):
        self.toggle_pause()

    def handle_key_press(self, event):
        actions = {
            STOP_HOTKEY: self.stop,
            RELOAD_HOTKEY: self.reload,
            SHUFFLE_HOTKEY: self.shuffle,
            PAUSE_HOTKEY: self.toggle_pause,
        }
        action = actions.get(event.key)
        if action is not None:
            action()

    def handle_resize(self, event):
        """Forward the new canvas size (pixels) to the debounced resize."""
        if event.width <= 0 or event.height <= 0:
            return
        self.scheduler.request_resize(event.width, event.height)
