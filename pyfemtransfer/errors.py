"""pyfemtransfer.errors
Exception taxonomy shared by every numerics routine.

* :class:`ContractViolation` - the caller broke a precondition.  Always
  raised eagerly, before any assembly or evaluation work starts.
* :class:`Unimplemented` - a valid request this package does not support yet.
* :class:`SolverNonconvergence` - the iterative solver hit its iteration cap.
"""


class ContractViolation(ValueError):
    """A documented precondition of a public routine was not met."""


class ComponentMismatch(ContractViolation):
    """Field and discrete space disagree on the number of components."""


class InvalidBoundaryIndicator(ContractViolation):
    """The reserved 'unassigned' indicator was used as a real boundary id."""


class DimensionMismatch(ContractViolation):
    def __init__(self, got: int, expected: int):
        super().__init__(f"Dimension mismatch: got {got}, expected {expected}.")
        self.got = got
        self.expected = expected


class NotUseful(ContractViolation):
    """The requested quantity carries no information for this space."""


class EmptySelection(ContractViolation):
    """A selection mask selects no entries."""


class MissingCapability(ContractViolation):
    """A field was asked for an evaluation it does not provide."""


class Unimplemented(NotImplementedError):
    """Supported in principle, not implemented for this configuration."""


class SolverNonconvergence(RuntimeError):
    def __init__(self, iterations: int, residual: float, tol: float):
        super().__init__(
            f"CG did not converge within {iterations} iterations "
            f"(residual {residual:.3e}, target {tol:.3e})."
        )
        self.iterations = iterations
        self.residual = residual
        self.tol = tol
