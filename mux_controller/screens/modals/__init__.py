"""Modal dialogs."""

from mux_controller.screens.modals.create_session import CreateSessionModal
from mux_controller.screens.modals.send_buffer import SendBufferModal
from mux_controller.screens.modals.send_keys import SendKeysModal
from mux_controller.screens.modals.session_picker import SessionPickerModal

__all__ = [
    "CreateSessionModal",
    "SendBufferModal",
    "SendKeysModal",
    "SessionPickerModal",
]
