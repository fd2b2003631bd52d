"""
  File with all constants in project
"""
# Module name used in logs and diagnostics
DATA_MODEL_MODULE_NAME = "dm"

# Uplink topics, one per outbound message type (device name substituted)
TOPIC_UP_GET_DEVICE_INFO = "/v1/device/up/getDeviceInfo/%s"
TOPIC_UP_DATAS = "/v1/device/up/datas/%s"
TOPIC_UP_EVENT = "/v1/device/up/event/%s"
TOPIC_UP_SET_REPLY = "/v1/device/up/set_reply/%s"
TOPIC_UP_SERVICE_REPLY = "/v1/device/up/service_reply/%s"
TOPIC_UP_DESIRED_GET = "/v1/device/up/desired_get/%s"
TOPIC_UP_DESIRED_DELETE = "/v1/device/up/desired_delete/%s"
TOPIC_UP_RAW = "/v1/device/up/raw/%s"

# Downlink topics the adapter subscribes to
TOPIC_DOWN_REGISTER_INFO = "/v1/device/down/registerInfo/%s"
TOPIC_DOWN_SET = "/v1/device/down/set/%s"
TOPIC_DOWN_SERVICE = "/v1/device/down/service/%s"
TOPIC_DOWN_EVENT_REPLY = "/v1/device/down/event_reply/%s"

# Positions of dynamic segments in downlink topics (1-based, counted by "/")
TOPIC_LEVEL_PRODUCT_KEY = 2
TOPIC_LEVEL_DEVICE_NAME = 5

# Payload templates
REGISTER_REQUEST_FMT = '{"id":"%s","eventTime":"%s"}'
PROPERTY_POST_FMT = '{"id":"%s","devices":[%s]}'
EVENT_POST_FMT = '{"id":"%s","time":"%s","identifier":"%s","data":%s}'
SERVICE_REPLY_FMT = '{"id":"%s","code":"%s","message":"%s"}'
PROPERTY_SET_REPLY_FMT = '{"id":"%s","code":%s,"data":%s}'
DESIRED_REQUEST_FMT = '{"id":"%s","params":%s}'

# Payload keys
JSON_KEY_ID = "id"
JSON_KEY_CODE = "code"
JSON_KEY_DATA = "data"
JSON_KEY_MESSAGE = "message"
JSON_KEY_PARAMS = "params"
JSON_KEY_DEV_INFO = "deviceInfos"
JSON_KEY_SERVICE_ID = "serviceId"
JSON_KEY_EID = "eid"
JSON_KEY_IDENTIFIER = "identifier"

# Diagnostic message types
DM_DIAG_MSG_TYPE_REQ = 0x00
DM_DIAG_MSG_TYPE_RSP = 0x01

# Publish QoS for every uplink message
DM_PUBLISH_QOS = 0

# Default answer for automatic property set replies
AUTO_REPLY_CODE = 200
AUTO_REPLY_DATA = "{}"

# Configuration file paths
CLIENT_CONFIG_PATH = "/etc/wb-mqtt-dm.conf"
# For logging to syslog/journald with name "wb-mqtt-dm"
WB_MQTT_DM_CLI_LOGGER_NAME = "wb-mqtt-dm"
DIAG_LOGGER_NAME = "wb.mqtt_dm.diag"
