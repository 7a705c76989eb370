from datetime import date
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from calendar_solver import (
    config,
    BinaryConstraint,
    InvalidProblemError,
    Operator,
    SearchLimitExceeded,
    UnaryConstraint,
    solve_with_report,
)
from calendar_solver.logging_utils import get_logger
from calendar_solver.postprocess.render_result import build_result

logger = get_logger()

app = FastAPI()

OperatorSymbol = Literal["==", "!=", "<", "<=", ">", ">="]


class ConstraintModel(BaseModel):
    # right があれば二項制約（#left op #right）、date があれば単項制約（#left op date）
    left: int
    op: OperatorSymbol
    right: Optional[int] = None
    fixed_date: Optional[date] = Field(default=None, alias="date")

    def to_constraint(self):
        if (self.right is None) == (self.fixed_date is None):
            raise InvalidProblemError(
                f"Constraint on #{self.left} must have exactly one of 'right' or 'date'."
            )
        op = Operator.parse(self.op)
        if self.right is not None:
            return BinaryConstraint(left=self.left, op=op, right=self.right)
        return UnaryConstraint(var=self.left, op=op, date=self.fixed_date)


class SolveRequest(BaseModel):
    n_meetings: int = Field(ge=0)
    range_start: date
    range_end: date
    constraints: List[ConstraintModel] = Field(default_factory=list)
    arc_mode: Optional[Literal["single_pass", "ac3"]] = None
    max_nodes: Optional[int] = Field(default=None, ge=1)
    forward_checking: Optional[bool] = None


@app.get("/api/health")
def api_health():
    return {"status": "ok"}


@app.post("/api/solve")
def api_solve(request: SolveRequest):
    """
    Solver API endpoint.
    Receives meeting count, date range and constraints, and calls solver logic.
    An unsatisfiable instance is a normal response with "solved": false.
    """
    try:
        constraints = [c.to_constraint() for c in request.constraints]
        report = solve_with_report(
            request.n_meetings,
            request.range_start,
            request.range_end,
            constraints,
            arc_mode=request.arc_mode,
            max_nodes=config.USE_CONFIG if request.max_nodes is None else request.max_nodes,
            forward_checking=request.forward_checking,
        )
    except InvalidProblemError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SearchLimitExceeded as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected error while solving")
        raise HTTPException(status_code=500, detail=str(e))

    return build_result(report, n_meetings=request.n_meetings)
