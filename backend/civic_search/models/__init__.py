from .issue import Issue, IssueComment, IssueTag, IssueVote

__all__ = ["Issue", "IssueComment", "IssueTag", "IssueVote"]
