"""Tests for the order CLI commands."""

import json
import pandas as pd
import pytest
from click.testing import CliRunner

from ..cli.main import cli

@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CLI runner pointed at a temporary database."""
    monkeypatch.setenv('DATABASE_URL', f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv('OUTPUT_FORMAT', 'text')
    monkeypatch.setenv('LOG_LEVEL', 'WARNING')
    monkeypatch.delenv('LOG_DIR', raising=False)
    return CliRunner()

def create(runner, name='Agim Berisha', phone='044123456', *extra):
    return runner.invoke(cli, ['create', '--name', name, '--phone', phone, *extra])

def test_create_order(runner):
    """Test creating an order prints its code and total."""
    result = create(runner, 'Agim Berisha', '044123456', '--rate', '2,5', '--area', '4')

    assert result.exit_code == 0, result.output
    assert 'Created order X001' in result.output
    assert 'total: 10.00' in result.output

def test_second_active_order_is_refused(runner):
    """Test the client limit aborts the command."""
    assert create(runner).exit_code == 0
    result = create(runner, 'agim berisha', '044 123 456')

    assert result.exit_code != 0
    assert 'active order' in result.output

def test_status_and_list(runner):
    """Test moving an order by code and listing by status."""
    create(runner)
    result = runner.invoke(cli, ['status', 'X001', 'ready'])
    assert result.exit_code == 0, result.output
    assert 'Order X001 is ready' in result.output

    result = runner.invoke(cli, ['list', 'ready'])
    assert result.exit_code == 0, result.output
    assert 'X001' in result.output
    assert 'Agim Berisha' in result.output

    result = runner.invoke(cli, ['list', 'received'])
    assert 'No orders found' in result.output

def test_status_regression_is_refused(runner):
    create(runner)
    runner.invoke(cli, ['status', 'X001', 'delivered'])
    result = runner.invoke(cli, ['status', 'X001', 'received'])

    assert result.exit_code == 0, result.output
    assert 'Order X001 is delivered' in result.output

def test_edit_and_show(runner):
    """Test edits are applied and status edits are ignored."""
    create(runner)
    result = runner.invoke(cli, ['edit', 'X001', 'notes=two rugs', 'status=delivered', 'flags.noShow=true'])
    assert result.exit_code == 0, result.output
    assert 'Ignoring' in result.output

    result = runner.invoke(cli, ['show', 'X001'])
    shown = json.loads(result.output)
    assert shown['notes'] == 'two rugs'
    assert shown['status'] == 'received'
    assert shown['flags']['noShow'] is True

def test_edit_with_form_field_names(runner):
    """Test snake_case field names are applied by the edit command."""
    create(runner)
    runner.invoke(cli, ['edit', 'X001', 'client_name=Agim B'])

    shown = json.loads(runner.invoke(cli, ['show', 'X001']).output)
    assert shown['clientName'] == 'Agim B'
    assert 'client_name' not in shown

def test_search(runner):
    create(runner, 'Zoë Hoxha', '045111222')
    result = runner.invoke(cli, ['search', 'zoe'])

    assert result.exit_code == 0, result.output
    assert 'X001' in result.output

def test_export_csv(runner, tmp_path):
    """Test the export writes one row per order."""
    create(runner)
    create(runner, 'Age Krasniqi', '045111222')
    output = tmp_path / 'orders.csv'

    result = runner.invoke(cli, ['export', str(output)])
    assert result.exit_code == 0, result.output

    frame = pd.read_csv(output)
    assert sorted(frame['code']) == ['X001', 'X002']
    assert set(frame['status']) == {'received'}

def test_merge_snapshot(runner, tmp_path):
    """Test a snapshot is merged in and written back with --push."""
    create(runner)
    snapshot = tmp_path / 'remote.json'
    snapshot.write_text(json.dumps([
        {'id': 'ord_remote', 'code': 'X005', 'status': 'cleaning', 'updatedAt': 10, 'clientName': 'Remote'}
    ]), encoding='utf-8')

    result = runner.invoke(cli, ['merge-snapshot', str(snapshot), '--push'])
    assert result.exit_code == 0, result.output
    assert 'Merged snapshot: 2 orders stored' in result.output

    pushed = json.loads(snapshot.read_text(encoding='utf-8'))
    assert pushed['schemaVersion'] == 2
    assert {o['code'] for o in pushed['orders']} == {'X001', 'X005'}

    result = create(runner, 'Age Krasniqi', '045111222')
    assert 'Created order X006' in result.output
