from split_macros.stats.innings import add_innings, innings_to_outs, outs_to_innings
from split_macros.stats.rates import batting_rates, pitching_rates

__all__ = ["add_innings", "batting_rates", "innings_to_outs", "outs_to_innings", "pitching_rates"]
