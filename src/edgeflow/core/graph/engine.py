"""Workflow Engine

This module executes a workflow definition:
1. Build every node through a NodeRegistry (`prepare`)
2. Locate the start node (first node typed "start" in listed order)
3. Walk the graph, merging each node's data delta into a shared
   ExecutionContext and following the edges labeled with its output
4. Fan out to concurrent asyncio tasks when an output matches several edges,
   joining them before the branch completes

Example:
    ```python
    engine = Engine.build(workflow_json)
    engine.prepare()
    final_context = await engine.execute({"user": "ada"})
    ```

Failure semantics at a fan-out:
    By default every launched sibling runs to completion even when another
    sibling fails; the first error in successor (edge) order is raised and
    the rest are logged. With `EngineConfig.cancel_siblings_on_failure` the
    join instead cancels outstanding siblings on the first failure.

Concurrent writes to the same context key from sibling branches are
last-writer-wins with no defined winner.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from edgeflow.core.errors import (
    CycleDetected,
    EngineNotPrepared,
    NodeExecutionFailed,
    NodeNotBuilt,
    NoStartNode,
)
from edgeflow.core.graph.context import ExecutionContext
from edgeflow.core.graph.definition import WorkflowDefinition
from edgeflow.core.graph.nodes.base.node import Node, NodeResult
from edgeflow.core.graph.registry import NodeRegistry, default_registry
from edgeflow.core.graph.state import NodeStatus, RunState
from edgeflow.core.logging import LogComponent, get_logger, log_state

logger = get_logger(LogComponent.ENGINE)


class EngineConfig(BaseModel):
    """
    Execution limits and failure policy.

    Attributes:
        max_steps: Node invocations allowed per run, across all branches
        max_branches: Fan-out branches allowed to be live at once
        allow_cycles: Permit revisiting a node already on the current branch
        cancel_siblings_on_failure: Cancel outstanding siblings when one fails
        log_context: Log the full context after each merge (DEBUG)
    """
    max_steps: int = Field(default=1000, gt=0)
    max_branches: int = Field(default=256, gt=0)
    allow_cycles: bool = Field(default=False)
    cancel_siblings_on_failure: bool = Field(default=False)
    log_context: bool = Field(default=False)


class Engine(BaseModel):
    """
    Executes one workflow definition.

    The engine owns the constructed nodes; every `execute` call gets a fresh
    ExecutionContext and RunState.

    Attributes:
        definition: The workflow being executed
        registry: Node constructors, keyed by type
        config: Limits and failure policy
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    definition: WorkflowDefinition
    registry: NodeRegistry = Field(default_factory=default_registry)
    config: EngineConfig = Field(default_factory=EngineConfig)

    _nodes: Dict[str, Node] = PrivateAttr(default_factory=dict)
    _routes: Dict[Tuple[str, str], List[str]] = PrivateAttr(default_factory=dict)
    _prepared: bool = PrivateAttr(default=False)
    _last_run: Optional[RunState] = PrivateAttr(default=None)

    @classmethod
    def build(
        cls,
        workflow: Union[WorkflowDefinition, Mapping[str, Any], str, bytes],
        registry: Optional[NodeRegistry] = None,
        config: Optional[EngineConfig] = None,
    ) -> "Engine":
        """Create an engine from a definition, mapping or JSON document.

        Only structural shape is validated here.

        Raises:
            DefinitionError: If the definition is malformed
        """
        if isinstance(workflow, WorkflowDefinition):
            definition = workflow
        elif isinstance(workflow, (str, bytes)):
            definition = WorkflowDefinition.from_json(workflow)
        else:
            definition = WorkflowDefinition.from_dict(workflow)

        return cls(
            definition=definition,
            registry=registry if registry is not None else default_registry(),
            config=config if config is not None else EngineConfig(),
        )

    @property
    def nodes(self) -> Dict[str, Node]:
        """Constructed nodes by id (empty until `prepare`)."""
        return dict(self._nodes)

    @property
    def last_run(self) -> Optional[RunState]:
        """State of the most recent `execute` call."""
        return self._last_run

    def prepare(self) -> None:
        """Construct every node through the registry.

        Raises:
            NodeBuildError: For an unknown type or invalid config, tagged
                with the node id
        """
        nodes: Dict[str, Node] = {}
        for node_def in self.definition.nodes:
            nodes[node_def.id] = self.registry.build(node_def)
            logger.debug(f"Built node: {node_def.id} of type {node_def.type}")

        routes: Dict[Tuple[str, str], List[str]] = {}
        for edge in self.definition.edges:
            routes.setdefault((edge.from_node, edge.output), []).append(edge.to_node)

        self._nodes = nodes
        self._routes = routes
        self._prepared = True
        logger.info(
            f"Prepared workflow {self.definition.name!r}: "
            f"{len(nodes)} nodes, {len(self.definition.edges)} edges"
        )

    def successors(self, node_id: str, output: str) -> List[str]:
        """Next node ids for `output` of `node_id`, in edge order."""
        return list(self._routes.get((node_id, output), ()))

    async def execute(self, initial_input: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Run the workflow from its start node.

        Args:
            initial_input: Seed for the execution context

        Returns:
            Snapshot of the final execution context

        Raises:
            EngineNotPrepared: If `prepare` has not been called
            GraphError: No start node, missing node, cycle or exhausted budget
            NodeExecutionError: A node failed (first failure by edge order)
        """
        if not self._prepared:
            raise EngineNotPrepared()

        run = RunState(
            workflow_id=self.definition.id,
            max_steps=self.config.max_steps,
            max_branches=self.config.max_branches,
        )
        self._last_run = run
        context = ExecutionContext(initial_input)
        run.start()

        try:
            start = self.definition.start_node()
            if start is None:
                raise NoStartNode()

            logger.info(f"Starting workflow: {self.definition.name} (run {run.run_id})")
            await self._run_branch(start.id, context, run, ())
        except Exception as e:
            run.finish(failed=True)
            logger.error(f"Workflow {self.definition.name} failed: {e}")
            raise

        run.finish()
        logger.info(
            f"Workflow {self.definition.name} completed: "
            f"{run.steps} steps in {run.duration:.3f}s"
        )
        return context.snapshot()

    async def _run_branch(
        self,
        node_id: str,
        context: ExecutionContext,
        run: RunState,
        path: Tuple[str, ...],
    ) -> None:
        """Execute nodes sequentially from `node_id` until the branch ends or forks."""
        current = node_id
        while True:
            node = self._nodes.get(current)
            if node is None:
                raise NodeNotBuilt(current)
            if current in path and not self.config.allow_cycles:
                raise CycleDetected(current, path)
            run.count_step(current)
            path = path + (current,)

            result = await self._invoke(current, node, context, run)

            next_nodes = self.successors(current, result.output)
            if not next_nodes:
                logger.debug(f"No more nodes to execute after {current}; branch complete")
                return

            if len(next_nodes) == 1:
                logger.debug(f"Transitioning {current} --[{result.output}]--> {next_nodes[0]}")
                current = next_nodes[0]
                continue

            await self._fan_out(current, next_nodes, context, run, path)
            return

    async def _invoke(
        self,
        node_id: str,
        node: Node,
        context: ExecutionContext,
        run: RunState,
    ) -> NodeResult:
        """Execute one node and merge its data delta into the context."""
        run.mark_status(node_id, NodeStatus.RUNNING)
        try:
            result = await node.execute(context.snapshot())
            if not isinstance(result, NodeResult):
                result = NodeResult.model_validate(result)
            context.update(result.data)
        except Exception as e:
            run.mark_status(node_id, NodeStatus.ERROR)
            run.add_error(node_id, str(e))
            logger.error(f"Error executing node {node_id}: {e}")
            raise NodeExecutionFailed(node_id, e) from e

        run.mark_status(node_id, NodeStatus.COMPLETED)
        logger.info(f"Node {node_id} executed. Output: {result.output}")
        if self.config.log_context:
            logger.debug(f"Context after node {node_id}:")
            log_state(logger, context.snapshot(), prefix="  ")
        return result

    async def _fan_out(
        self,
        node_id: str,
        next_nodes: List[str],
        context: ExecutionContext,
        run: RunState,
        path: Tuple[str, ...],
    ) -> None:
        """Run one task per successor against the shared context and join them."""
        run.open_branches(len(next_nodes), node_id)
        logger.info(f"Executing {len(next_nodes)} nodes in parallel after {node_id}")

        tasks = [
            asyncio.create_task(self._run_sibling(next_id, context, run, path))
            for next_id in next_nodes
        ]
        try:
            if self.config.cancel_siblings_on_failure:
                await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
                for task in tasks:
                    task.cancel()
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        failures = [
            (next_id, outcome)
            for next_id, outcome in zip(next_nodes, outcomes)
            if isinstance(outcome, Exception)
        ]
        if not failures:
            return

        for next_id, error in failures[1:]:
            logger.error(f"Additional failure in branch {next_id} (not re-raised): {error}")
        raise failures[0][1]

    async def _run_sibling(
        self,
        node_id: str,
        context: ExecutionContext,
        run: RunState,
        path: Tuple[str, ...],
    ) -> None:
        logger.debug(f"Started executing branch: {node_id}")
        try:
            await self._run_branch(node_id, context, run, path)
        except Exception as e:
            logger.error(f"Execution error in branch starting at {node_id}: {e}")
            raise
        finally:
            run.close_branch()
