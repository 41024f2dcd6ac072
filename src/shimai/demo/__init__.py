"""デモワークロード。"""

from shimai.demo._workload import FileWritingWorkload, WorkloadError, run_demo

__all__ = [
    "FileWritingWorkload",
    "WorkloadError",
    "run_demo",
]
