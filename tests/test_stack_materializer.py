"""Tests for writing the stack files."""
import yaml

from envstack.services.stack.catalog import get_profile
from envstack.services.stack.materializer import StackMaterializer, generate_secret
from envstack.services.stack.models import StackContext


class TestMaterialize:
    """Test file generation in the working directory."""

    def test_writes_both_files(self, tmp_path):
        workdir = tmp_path / 'environment'
        stack = StackMaterializer(workdir).materialize(
            get_profile('standard'), StackContext(address='192.0.2.10')
        )

        assert stack.workdir == workdir
        assert stack.compose_file == workdir / 'docker-compose.yml'
        assert stack.proxy_file == workdir / 'nginx.conf'
        assert yaml.safe_load(stack.compose_file.read_text())['services']
        assert 'server_name 192.0.2.10;' in stack.proxy_file.read_text()

    def test_rerun_is_identical(self, tmp_path):
        materializer = StackMaterializer(tmp_path)
        context = StackContext(address='192.0.2.10', secret='fixed')
        profile = get_profile('project')

        first = materializer.materialize(profile, context)
        compose, proxy = first.compose_file.read_bytes(), first.proxy_file.read_bytes()
        second = materializer.materialize(profile, context)

        assert second.compose_file.read_bytes() == compose
        assert second.proxy_file.read_bytes() == proxy

    def test_rerun_overwrites(self, tmp_path):
        materializer = StackMaterializer(tmp_path)
        profile = get_profile('standard')

        materializer.materialize(profile, StackContext(address='10.0.0.1'))
        stack = materializer.materialize(profile, StackContext(address='10.0.0.2'))

        assert '10.0.0.1' not in stack.compose_file.read_text()
        assert '10.0.0.1' not in stack.proxy_file.read_text()

    def test_operator_value_propagates_verbatim(self, tmp_path):
        address = 'stack.internal.example'
        stack = StackMaterializer(tmp_path).materialize(
            get_profile('standard'), StackContext(address=address)
        )

        compose = stack.compose_file.read_text()
        assert compose.count(address) == 4
        assert f'http://{address}/gitea' in compose
        assert f'server_name {address};' in stack.proxy_file.read_text()


class TestContext:
    """Test render context construction."""

    def test_no_secret_for_standard(self, tmp_path):
        context = StackMaterializer(tmp_path).context_for(get_profile('standard'), '192.0.2.10')
        assert context.secret is None

    def test_secret_generated_for_project(self, tmp_path):
        context = StackMaterializer(tmp_path).context_for(get_profile('project'), '192.0.2.10')

        assert len(context.secret) == 64
        int(context.secret, 16)

    def test_given_secret_kept(self, tmp_path):
        context = StackMaterializer(tmp_path).context_for(get_profile('project'), '192.0.2.10', 'abc')
        assert context.secret == 'abc'

    def test_secrets_differ(self):
        assert generate_secret() != generate_secret()
