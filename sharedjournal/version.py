SHAREDJOURNAL_VERSION = "2.0.0"
