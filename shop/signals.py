from django.dispatch import Signal

# Sent once per process after settings-driven registrations ran.
# Receivers get ``environment`` and may add to or remove from its sets.
environment_ready = Signal()
