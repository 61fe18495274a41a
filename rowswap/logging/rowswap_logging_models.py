from .models import Entry, LogLevel


class ServerTrace(Entry, kw_only=True):
    handler: str
    host: str
    port: int
    level: LogLevel = LogLevel.TRACE

class ServerDebug(Entry, kw_only=True):
    handler: str
    host: str
    port: int
    level: LogLevel = LogLevel.DEBUG

class ServerInfo(Entry, kw_only=True):
    handler: str
    host: str
    port: int
    level: LogLevel = LogLevel.INFO

class ServerError(Entry, kw_only=True):
    handler: str
    host: str
    port: int
    level: LogLevel = LogLevel.ERROR

class ServerFatal(Entry, kw_only=True):
    handler: str
    host: str
    port: int
    level: LogLevel = LogLevel.FATAL

class SwapDebug(Entry, kw_only=True):
    path: str
    line_count: int
    level: LogLevel = LogLevel.DEBUG

class SwapInfo(Entry, kw_only=True):
    path: str
    line_count: int
    level: LogLevel = LogLevel.INFO

class SwapError(Entry, kw_only=True):
    path: str
    line_count: int
    level: LogLevel = LogLevel.ERROR
