from enum import Enum


class Status(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class MemoryTier(str, Enum):
    CACHE = "cache"
    RAM = "ram"
    VRAM = "vram"
    DISK = "disk"


class Quantization(str, Enum):
    FLOAT32 = "float32"
    INT8 = "int8"
    BFLOAT16 = "bfloat16"


class Operation(str, Enum):
    ADD = "add"
    MUL = "mul"
    REDUCE = "reduce"


class SyncMode(str, Enum):
    BARRIER = "barrier"
    PIPELINE = "pipeline"
    WAVEFRONT = "wavefront"
    ASYNC = "async"
