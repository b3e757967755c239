import logging

from .bus import EventBus

# Configure logging for the teleop package
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:     %(name)s - %(message)s",
)

logging.getLogger("teleop").setLevel(logging.INFO)

event_bus = EventBus()
