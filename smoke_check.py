# smoke_check.py - import the launcher module and drive one search against a scratch profile
from pathlib import Path
import importlib
import sys
import tempfile
import traceback

mod_name = 'quickpaste'
print('quickpaste path:', Path('quickpaste.py').resolve())
importlib.invalidate_caches()
if mod_name in sys.modules:
    del sys.modules[mod_name]

try:
    qp = importlib.import_module(mod_name)
    from core.config_manager import ConfigManager
    from core.host_bridge import HostBridge

    class PrintingHost(HostBridge):
        def copy_text(self, text):
            print('copy_text:', repr(text))

        def hide_window(self):
            print('hide_window')

        def exit_plugin(self):
            print('exit_plugin')
            self.emit_exit()

    with tempfile.TemporaryDirectory() as td:
        api = qp.QuickPasteAPI(config_manager=ConfigManager(base_dir=Path(td)), host=PrintingHost())
        print('create:', api.create_entry({'title': 'Email', 'trigger': 'em', 'data': 'me@example.com'})['status'])
        print('activate:', api.activate('quickpaste-search', 'qp e')['candidates'])
        print('enter:', api.key_down('Enter')['view'])
        api.shutdown()
except Exception as e:
    print('Smoke check FAILED:', e)
    traceback.print_exc()
