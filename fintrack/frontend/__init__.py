# fintrack/frontend/__init__.py
