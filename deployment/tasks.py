import importlib.util
import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Tuple

TASK_ATTRIBUTE = "deploy_task"


class DeployTask(NamedTuple):
    """A named, tagged unit of deployment that the runner can execute selectively."""

    name: str
    func: Callable[[Any], Any]
    tags: Tuple[str, ...]
    dependencies: Tuple[str, ...] = tuple()

    def run(self, env: Any) -> Any:
        return self.func(env)


def _as_tuple(values: typing.Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    if values is None:
        return tuple()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


def task(
    tags: typing.Union[str, Iterable[str]],
    dependencies: typing.Union[str, Iterable[str], None] = None,
    name: Optional[str] = None,
):
    """
    Declares a function as a deployment task.

    The function is left callable as-is; the task description is attached to it
    and picked up by `load_tasks`. Dependencies are tags: every task carrying one
    of them runs before this one.
    """

    def decorator(func):
        deploy_task = DeployTask(
            name=name or func.__name__,
            func=func,
            tags=_as_tuple(tags),
            dependencies=_as_tuple(dependencies),
        )
        setattr(func, TASK_ATTRIBUTE, deploy_task)
        return func

    return decorator


class TaskRegistry:
    """Ordered collection of deployment tasks."""

    class Invalid(Exception):
        """Raised when a task or the task graph is malformed"""

    class DuplicateTask(Exception):
        """Raised when two tasks share a name"""

    class UnknownTask(Exception):
        """Raised when looking up a task name that was never registered"""

    class UnknownTag(Exception):
        """Raised when no registered task carries a requested tag"""

    def __init__(self):
        self._tasks: typing.Dict[str, DeployTask] = OrderedDict()

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self._tasks.values())

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def add(self, deploy_task: DeployTask) -> DeployTask:
        if not deploy_task.tags:
            raise self.Invalid(f"Task '{deploy_task.name}' must declare at least one tag.")
        if deploy_task.name in self._tasks:
            raise self.DuplicateTask(f"Task '{deploy_task.name}' is already registered.")
        self._tasks[deploy_task.name] = deploy_task
        return deploy_task

    def register(self, *args, **kwargs):
        """Decorator form of `task` that also adds the task to this registry."""

        def decorator(func):
            func = task(*args, **kwargs)(func)
            self.add(getattr(func, TASK_ATTRIBUTE))
            return func

        return decorator

    def get(self, name: str) -> DeployTask:
        try:
            return self._tasks[name]
        except KeyError:
            raise self.UnknownTask(f"No deployment task named '{name}'.")

    def tags(self) -> List[str]:
        """Returns every tag carried by a registered task, in registration order."""
        tags = list()
        for deploy_task in self._tasks.values():
            for tag in deploy_task.tags:
                if tag not in tags:
                    tags.append(tag)
        return tags

    def tagged(self, tag: str) -> List[DeployTask]:
        return [t for t in self._tasks.values() if tag in t.tags]

    def select(self, tags: Optional[Iterable[str]] = None) -> List[DeployTask]:
        """
        Returns the tasks to run for the given tags, dependencies first.
        With no tags every registered task is selected.
        """
        tags = _as_tuple(tags)
        if not tags:
            roots = list(self._tasks.values())
        else:
            for tag in tags:
                if not self.tagged(tag):
                    raise self.UnknownTag(f"No deployment task is tagged '{tag}'.")
            roots = [t for t in self._tasks.values() if set(t.tags) & set(tags)]

        selected: List[DeployTask] = list()
        visiting: List[str] = list()

        def visit(deploy_task: DeployTask) -> None:
            if deploy_task in selected:
                return
            if deploy_task.name in visiting:
                cycle = " -> ".join(visiting + [deploy_task.name])
                raise self.Invalid(f"Dependency cycle between deployment tasks: {cycle}")

            visiting.append(deploy_task.name)
            for dependency in deploy_task.dependencies:
                providers = [t for t in self.tagged(dependency) if t.name != deploy_task.name]
                if not providers:
                    raise self.UnknownTag(
                        f"Task '{deploy_task.name}' depends on tag '{dependency}', "
                        f"which no other task carries."
                    )
                for provider in providers:
                    visit(provider)
            visiting.pop()
            selected.append(deploy_task)

        for root in roots:
            visit(root)
        return selected

    def run(self, env: Any, tags: Optional[Iterable[str]] = None) -> typing.OrderedDict[str, Any]:
        """Runs the selected tasks in order and returns their results by task name."""
        results = OrderedDict()
        for deploy_task in self.select(tags):
            print(f"\nRunning deployment task '{deploy_task.name}' {list(deploy_task.tags)}")
            results[deploy_task.name] = deploy_task.run(env)
        return results


def _load_module(filepath: Path):
    module_name = f"deploy_tasks.{filepath.stem}"
    spec = importlib.util.spec_from_file_location(module_name, filepath)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def load_tasks(directory: Path, registry: Optional[TaskRegistry] = None) -> TaskRegistry:
    """
    Imports every task file in a directory, in filename order, and registers
    the tasks they declare. Files starting with an underscore are skipped.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Deployment tasks directory not found at {directory}")

    registry = registry if registry is not None else TaskRegistry()
    for filepath in sorted(directory.glob("*.py")):
        if filepath.name.startswith("_"):
            continue
        module = _load_module(filepath)
        for value in vars(module).values():
            deploy_task = getattr(value, TASK_ATTRIBUTE, None)
            if not isinstance(deploy_task, DeployTask):
                continue
            if getattr(value, "__module__", None) != module.__name__:
                continue  # imported from another task file
            registry.add(deploy_task)
    return registry
