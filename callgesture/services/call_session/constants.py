"""User-facing messages for the call flow."""

INVITATION_FAILED_MESSAGE = "Failed to initiate call. Please try again."
JOIN_FAILED_MESSAGE = "Could not connect the call. Please try again."
CALL_LOCKED_MESSAGE = "Card locked! Use the End button to close."

MICROPHONE_ON_MESSAGE = "Microphone is now on"
MICROPHONE_MUTED_MESSAGE = "Microphone is now muted"
VIDEO_ON_MESSAGE = "Video is now on"
VIDEO_OFF_MESSAGE = "Video is now off"
SPEAKER_ON_MESSAGE = "Speaker is now on"
SPEAKER_OFF_MESSAGE = "Speaker is now off"
CAMERA_SWITCH_FAILED_MESSAGE = "Could not switch camera"
