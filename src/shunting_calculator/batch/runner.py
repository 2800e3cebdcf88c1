"""Evaluate many arithmetic expressions in parallel worker processes."""
from multiprocessing import Pipe, Process, cpu_count
from multiprocessing.connection import Connection
from pathlib import Path
from typing import IO, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from shunting_calculator.batch.worker import WorkerProcess
from shunting_calculator.common.logger import logger
from shunting_calculator.common.operations import OperationFailure, OperationResult

# Kind reported for a worker that exited without sending a payload
WORKER_CRASHED = "WorkerCrashed"


class ActiveWorker(NamedTuple):
    """A running worker process and the expression it was given."""

    process: Process
    conn: Connection
    line_number: int
    expression: str


def format_payload(payload: dict) -> str:
    """
    Render a worker payload as a single output line.

    :param dict payload: Dumped OperationResult or OperationFailure

    :return: "<expression> = <result>" or "<expression> -> ERROR: <kind>: <message>"
    :rtype: str
    """
    if "result" in payload:
        return str(OperationResult(**payload))
    return str(OperationFailure(**payload))


class BatchEvaluator(BaseModel):
    """
    Evaluate a list of expressions, one worker process per expression.

    Features:
        - Writes results immediately to disk as soon as a worker finishes.
        - Ensures each worker is destroyed immediately after finishing.
        - Handles multiple simultaneous workers up to CPU core count.
        - Reports a worker that dies without answering as a failed line instead of aborting the batch.
    """

    model_config = ConfigDict(frozen=True)

    output_file: Path = Field(..., description="File receiving one result line per expression")
    max_workers: Optional[int] = Field(default=None, ge=1, description="Maximum number of simultaneous workers")

    def _spawn_worker(self, expr: str, line_number: int) -> ActiveWorker:
        """
        Spawn a WorkerProcess for the given expression.

        :param str expr: Arithmetic expression
        :param int line_number: Line number of expression in input

        :return: The started process with its parent pipe
        :rtype: ActiveWorker
        """
        parent_conn, child_conn = Pipe()
        worker = WorkerProcess(conn=child_conn, expression=expr, line_number=line_number)
        process = Process(target=worker.run)
        process.start()
        # The child owns its end now, so recv() sees EOF if the child dies
        child_conn.close()
        return ActiveWorker(process, parent_conn, line_number, expr)

    @staticmethod
    def _receive_payload(worker: ActiveWorker) -> dict:
        """
        Read the payload of a finished worker.

        :param ActiveWorker worker: Finished worker

        :return: Worker payload, or a failure payload if the worker sent nothing
        :rtype: dict
        """
        try:
            return worker.conn.recv()
        except EOFError:
            logger.error(
                f"👷💥 Worker on line {worker.line_number} exited with code {worker.process.exitcode} "
                f"without sending a result"
            )
            return OperationFailure(
                expression=worker.expression,
                error=f"worker exited with code {worker.process.exitcode}",
                kind=WORKER_CRASHED,
                line=worker.line_number,
            ).model_dump()

    def _collect_finished_workers(
        self, active_workers: List[ActiveWorker], f_out: IO[str], payloads: List[dict]
    ) -> None:
        """
        Collect results from all finished workers and write them to the output file.

        Finished workers are removed from the active_workers list and their payloads appended to payloads.

        :param list active_workers: Running workers
        :param IO f_out: Open file handle for writing results
        :param list payloads: Collected worker payloads
        """
        # Iterate in reverse to safely remove finished workers while iterating
        for i in reversed(range(len(active_workers))):
            worker = active_workers[i]
            if not worker.process.is_alive():
                payload = self._receive_payload(worker)
                worker.conn.close()
                worker.process.join()
                active_workers.pop(i)

                # Write output immediately
                f_out.write(f"{format_payload(payload)}\n")
                f_out.flush()
                payloads.append(payload)

    def run(self, expressions: List[str]) -> List[dict]:
        """
        Evaluate every expression and write the results to the output file.

        Steps:
            1. Drop blank expressions.
            2. Spawn worker processes for each expression, respecting max_workers.
            3. Write results to output file immediately after each worker finishes.

        :param List[str] expressions: Expressions to evaluate, one per input line

        :return: Worker payloads sorted by line number
        :rtype: List[dict]
        """
        data: List[str] = [expr.strip() for expr in expressions if expr.strip()]
        payloads: List[dict] = []

        logger.info(f"📦 Evaluating {len(data)} expressions into {self.output_file}")

        with self.output_file.open("w", encoding="utf-8") as f_out:
            # Limit number of active workers to CPU cores or number of expressions
            max_workers: int = max(1, min(self.max_workers or cpu_count(), len(data)))
            active_workers: List[ActiveWorker] = []

            for line_number, expr in enumerate(data, start=1):
                # Wait until a worker slot is available
                while len(active_workers) >= max_workers:
                    self._collect_finished_workers(active_workers, f_out, payloads)

                # Spawn new worker for current expression
                active_workers.append(self._spawn_worker(expr, line_number))

            # Collect remaining active workers
            while active_workers:
                self._collect_finished_workers(active_workers, f_out, payloads)

        failed = sum(1 for payload in payloads if "error" in payload)
        logger.info(f"📦✅ Batch finished: {len(payloads) - failed} succeeded, {failed} failed")
        return sorted(payloads, key=lambda payload: payload["line"])
