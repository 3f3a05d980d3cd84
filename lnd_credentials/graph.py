"""Run a set of named tasks with as much concurrency as their dependencies allow.

Each task is `name: (dependencies, body)`. A body is called with the results of its
declared dependencies as keyword arguments, and only those, once they have all
completed. The first failure stops any task that hasn't started yet and is raised
from `run()` as it was.
"""
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Tuple, Union

import trio

from lnd_credentials.util import CustomAdapter

logger = CustomAdapter(logging.getLogger("graph"), None)

Body = Callable[..., Union[Any, Awaitable[Any]]]


class GraphError(ValueError):
    """The task graph can't be run: unknown tasks or a dependency cycle.
    """


class Task:
    def __init__(self, name: str, depends_on: Iterable[str], body: Body):
        if isinstance(depends_on, str):
            depends_on = (depends_on,)
        self.name = name
        self.depends_on = frozenset(depends_on)
        self.body = body

    def __repr__(self):
        return (
            f"{self.__class__.__name__}({self.name!r}, "
            f"depends_on={sorted(self.depends_on)})"
        )


class TaskGraph:
    """A validated set of tasks, checked for unknown dependencies and cycles before
    anything runs.
    """

    def __init__(self, tasks: Mapping[str, Tuple[Iterable[str], Body]]):
        self.tasks = {
            name: Task(name, depends_on, body)
            for name, (depends_on, body) in tasks.items()
        }
        self.order = self._sort()

    def __len__(self):
        return len(self.tasks)

    def __iter__(self):
        return iter(self.order)

    def __contains__(self, item):
        return item in self.tasks

    def __str__(self):
        return f"TaskGraph with {self.__len__()} tasks: {self.order}"

    def _sort(self) -> list:
        """Topological order of the tasks, ties broken by declaration order.
        """
        for task in self.tasks.values():
            unknown = task.depends_on - self.tasks.keys()
            if unknown:
                raise GraphError(
                    f"Task {task.name} depends on unknown task(s) {sorted(unknown)}"
                )

        pending = {name: set(task.depends_on) for name, task in self.tasks.items()}
        ready = [name for name, deps in pending.items() if not deps]
        for name in ready:
            del pending[name]

        order = []
        while ready:
            name = ready.pop(0)
            order.append(name)
            for other in list(pending):
                pending[other].discard(name)
                if not pending[other]:
                    del pending[other]
                    ready.append(other)

        if pending:
            raise GraphError(f"Dependency cycle between tasks {sorted(pending)}")
        return order

    async def run(self, of: str):
        """Run every task and return the result of task `of`.
        """
        if of not in self.tasks:
            raise GraphError(f"Unknown result task {of}")

        results: Dict[str, Any] = {}
        failures = []
        finished = {name: trio.Event() for name in self.tasks}

        def abort(task: Task, error: Exception):
            if not failures:
                logger.debug(f"Task {task.name} failed: {error!r}")
            failures.append(error)
            # Release every waiting task so it can see the failure and skip its body
            for event in finished.values():
                event.set()

        async def run_task(task: Task):
            for name in task.depends_on:
                await finished[name].wait()
            if failures:
                logger.debug(f"Skipping task {task.name}")
                return
            try:
                result = task.body(**{name: results[name] for name in task.depends_on})
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                abort(task, e)
                return
            results[task.name] = result
            finished[task.name].set()

        async with trio.open_nursery() as nursery:
            for name in self.order:
                nursery.start_soon(run_task, self.tasks[name])

        if failures:
            raise failures[0]
        return results[of]


async def run(tasks: Mapping[str, Tuple[Iterable[str], Body]], of: str):
    """Build a TaskGraph from `tasks` and return the result of task `of`.
    """
    return await TaskGraph(tasks).run(of)
