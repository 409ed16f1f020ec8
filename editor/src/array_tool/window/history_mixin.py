"""History management and undo/redo for ArrayToolWindow"""

from array_tool.utils.logger import loggerRaise


class HistoryMixin:
    """Undo/redo of scene plus array set snapshots, and status bar updates"""

    def _capture_current_state(self):
        """Scene objects, array set records and the edit selection"""
        return {
            'scene': self.scene.get_snapshot(),
            'array_sets': self.controller.get_snapshot(),
            'selected_index': self.selected_index,  # UI state
        }

    def _restore_state(self, state):
        """Put the scene and array sets back to a captured state"""
        if not state:
            return

        self._is_applying_history = True
        try:
            self.scene.set_snapshot(state['scene'])
            self.controller.set_snapshot(state['array_sets'])

            # Selection may point past the restored collection
            selected = state.get('selected_index', -1)
            self.selected_index = selected if self.controller.get(selected) is not None else -1
            if self.selected_index >= 0:
                self.settings_panel.set_settings(self.controller.get(self.selected_index).settings)

            self._refresh_array_set_list()
            self._refresh_buttons()
        except Exception as e:
            loggerRaise(e, "Error restoring array tool state")
        finally:
            self._is_applying_history = False
            self._update_status_bar()

    def _save_state(self, description):
        """Push a capture labelled with the command that produced it"""
        if self._is_applying_history:
            return  # Restoring a capture is not itself a command

        self.history_manager.save_state(self._capture_current_state(), description)

    def _on_history_changed(self, can_undo, can_redo):
        """Sync the Edit menu labels and the status bar with the history"""
        if hasattr(self, 'undo_action'):
            self.undo_action.setEnabled(can_undo)
            undo_desc = self.history_manager.get_undo_description()
            self.undo_action.setText(f"Undo {undo_desc}" if can_undo and undo_desc else "Undo")
        if hasattr(self, 'redo_action'):
            self.redo_action.setEnabled(can_redo)
            redo_desc = self.history_manager.get_redo_description()
            self.redo_action.setText(f"Redo {redo_desc}" if can_redo and redo_desc else "Redo")
        self._update_status_bar()

    def _update_status_bar(self):
        """Update status bar with last action and collection stats"""
        current_desc = self.history_manager.get_current_description()
        left_msg = f"Last action: {current_desc}" if current_desc else "Ready"

        set_count = len(self.controller) if hasattr(self, 'controller') else 0
        selected = self.controller.get(getattr(self, 'selected_index', -1)) if hasattr(self, 'controller') else None
        if selected is not None:
            right_msg = f"Array Sets: {set_count} | Editing: {selected.name}"
        else:
            right_msg = f"Array Sets: {set_count} | No selection"

        if hasattr(self, 'status_left'):
            self.status_left.setText(left_msg)
        if hasattr(self, 'status_right'):
            self.status_right.setText(right_msg)

    def undo(self):
        """Revert the last array set command"""
        state = self.history_manager.undo()
        if state:
            self._restore_state(state)

    def redo(self):
        """Reapply the last reverted command"""
        state = self.history_manager.redo()
        if state:
            self._restore_state(state)
