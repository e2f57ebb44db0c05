from .splice import NOOP_WARNING, Splice, apply_candidate, realign_replacement

__all__ = ["apply_candidate", "realign_replacement", "Splice", "NOOP_WARNING"]
