from .adapter import MqttConnectionConfig, MqttTransport

__all__ = ["MqttConnectionConfig", "MqttTransport"]
