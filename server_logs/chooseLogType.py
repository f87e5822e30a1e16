from server_logs.sinks import CompositeLogger, FileLogger, JSONLogger, StdoutLogger


def get_logger(mode="dev", log_type="server", base_path="logs"):
    # prod keeps a file per log type for the /admin/logs viewer
    if mode == "prod":
        return CompositeLogger(
            FileLogger(log_type=log_type, base_path=base_path),
            JSONLogger(log_type=log_type)
        )
    return StdoutLogger(log_type=log_type)
