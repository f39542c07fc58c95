"""Testes do reconhecimento de branches de ticket."""
import pytest

from restmine.git_monitor.branch_parser import IssueBranchParser, IssueHandle


class TestClassify:

    @pytest.mark.parametrize('branch, issue_type, issue_id', [
        ('iss1234', 'iss', '1234'),
        ('iss1', 'iss', '1'),
        ('iss3344', 'iss', '3344'),
        ('org3355', 'org', '3355'),
        ('org1', 'org', '1'),
        ('ISS0042', 'ISS', '0042'),
    ])
    def test_issue_branch(self, branch, issue_type, issue_id):
        assert IssueBranchParser.classify(branch) == IssueHandle(type=issue_type, id=issue_id)

    @pytest.mark.parametrize('branch', [
        'test', 'hier', '', None, 'iss', '1234', 'issue12', 'feature/iss12', 'iss12a', 'iss12\n',
    ])
    def test_not_an_issue_branch(self, branch):
        assert IssueBranchParser.classify(branch) is False

    def test_handle_is_immutable(self):
        handle = IssueBranchParser.classify('iss12')
        with pytest.raises(AttributeError):
            handle.id = '13'
