from teleop.transport.http import RobotClient

__all__ = ["RobotClient"]
