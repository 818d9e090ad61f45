pytest_plugins = ["bitbucket_provider.testing.conftest"]
