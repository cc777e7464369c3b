"""
Roadmap Graph Builder - Application Layer

Projects a Roadmap onto the node/edge shape the roadmap diagram renders:
nodes on a square-ish grid, one edge per effective prerequisite.

Algorithm:
    1. cols = ceil(sqrt(n)); step i sits at column i % cols, row i // cols
    2. Declared prerequisites naming an existing step become edges
    3. A step with no declared prerequisites gets an implicit edge from
       the step before it
    4. learning_sequence() supplies the suggested order; on a cycle the
       insertion order is used and a warning is attached
"""
import logging
import math
from typing import Any, Dict, List

from domain.entities.roadmap import Roadmap
from domain.exceptions.domain_exceptions import CircularDependencyError

logger = logging.getLogger(__name__)

NODE_SPACING_X = 300
NODE_SPACING_Y = 150


class RoadmapGraphBuilder:
    """Stateless; one instance can serve every request."""

    def build(self, roadmap: Roadmap) -> Dict[str, Any]:
        steps = roadmap.steps
        cols = max(1, math.ceil(math.sqrt(len(steps))))
        available = {s.id for s in roadmap.available_steps()}
        known = {s.id for s in steps}

        nodes: List[Dict[str, Any]] = []
        edges: List[Dict[str, Any]] = []

        for index, step in enumerate(steps):
            nodes.append({
                "id": step.id,
                "title": step.title,
                "description": step.description,
                "duration": step.duration,
                "completed": step.completed,
                "available": step.id in available,
                "position": {
                    "x": (index % cols) * NODE_SPACING_X,
                    "y": (index // cols) * NODE_SPACING_Y,
                },
            })

            implicit = not step.prerequisites
            for prereq in roadmap.effective_prerequisites(step):
                if prereq not in known:
                    continue
                edges.append({
                    "id": f"{prereq}-{step.id}",
                    "source": prereq,
                    "target": step.id,
                    "animated": not step.completed,
                    "implicit": implicit,
                })

        warnings: List[str] = []
        try:
            warnings.extend(roadmap.validate_prerequisite_graph())
            sequence = [s.id for s in roadmap.learning_sequence()]
        except CircularDependencyError as exc:
            logger.warning("Roadmap %s has circular prerequisites: %s", roadmap.roadmap_id, exc)
            warnings.append(str(exc))
            sequence = [s.id for s in steps]

        return {
            "nodes": nodes,
            "edges": edges,
            "sequence": sequence,
            "warnings": warnings,
        }
