pytest_plugins = ['cmsentry.testing.pytest']
